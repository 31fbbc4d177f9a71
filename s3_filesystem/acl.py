from __future__ import annotations
"""Translation between filesystem visibility and S3 canned ACLs."""
from typing import Iterable, Mapping

from .exceptions import InvalidVisibilityProvided
from .models import Visibility

ACL_PRIVATE = "private"
ACL_PUBLIC_READ = "public-read"
ACL_PUBLIC_READ_WRITE = "public-read-write"
ACL_AUTHENTICATED_READ = "authenticated-read"

PUBLIC_ACLS = frozenset({ACL_PUBLIC_READ, ACL_PUBLIC_READ_WRITE})

ALL_USERS_URI = "http://acs.amazonaws.com/groups/global/AllUsers"
AUTHENTICATED_USERS_URI = "http://acs.amazonaws.com/groups/global/AuthenticatedUsers"


def acl_for_visibility(visibility: object) -> str:
    """Return the canned ACL written for ``visibility``.

    Raises:
        InvalidVisibilityProvided: for anything other than public or private.
    """

    if visibility == Visibility.PUBLIC:
        return ACL_PUBLIC_READ
    if visibility == Visibility.PRIVATE:
        return ACL_PRIVATE
    raise InvalidVisibilityProvided.with_visibility(
        visibility, f"either {Visibility.PUBLIC!r} or {Visibility.PRIVATE!r}"
    )


def visibility_for_acl(acl: str | None) -> str:
    if acl in PUBLIC_ACLS:
        return Visibility.PUBLIC
    return Visibility.PRIVATE


def acl_from_grants(grants: Iterable[Mapping]) -> str:
    """Reduce a ``GetObjectAcl`` grant list to the closest canned ACL name."""

    public: set[str] = set()
    authenticated: set[str] = set()
    for grant in grants:
        grantee = grant.get("Grantee") or {}
        permission = grant.get("Permission")
        if grantee.get("URI") == ALL_USERS_URI:
            public.add(permission)
        elif grantee.get("URI") == AUTHENTICATED_USERS_URI:
            authenticated.add(permission)

    if "FULL_CONTROL" in public or {"READ", "WRITE"} <= public:
        return ACL_PUBLIC_READ_WRITE
    if "READ" in public:
        return ACL_PUBLIC_READ
    if "READ" in authenticated or "FULL_CONTROL" in authenticated:
        return ACL_AUTHENTICATED_READ
    return ACL_PRIVATE
