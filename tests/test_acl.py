import unittest

from s3_filesystem.acl import (
    ALL_USERS_URI,
    AUTHENTICATED_USERS_URI,
    acl_for_visibility,
    acl_from_grants,
    visibility_for_acl,
)
from s3_filesystem.exceptions import InvalidVisibilityProvided
from s3_filesystem.models import Visibility


def group_grant(uri, permission):
    return {"Grantee": {"Type": "Group", "URI": uri}, "Permission": permission}


OWNER_GRANT = {"Grantee": {"Type": "CanonicalUser", "ID": "owner"}, "Permission": "FULL_CONTROL"}


class AclTests(unittest.TestCase):
    def test_acl_for_visibility(self):
        self.assertEqual("public-read", acl_for_visibility(Visibility.PUBLIC))
        self.assertEqual("private", acl_for_visibility(Visibility.PRIVATE))

    def test_acl_for_visibility_rejects_other_values(self):
        for value in ("public-read", "", None, "PUBLIC"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidVisibilityProvided):
                    acl_for_visibility(value)

    def test_visibility_for_acl(self):
        self.assertEqual(Visibility.PUBLIC, visibility_for_acl("public-read"))
        self.assertEqual(Visibility.PUBLIC, visibility_for_acl("public-read-write"))
        self.assertEqual(Visibility.PRIVATE, visibility_for_acl("authenticated-read"))
        self.assertEqual(Visibility.PRIVATE, visibility_for_acl("bucket-owner-full-control"))
        self.assertEqual(Visibility.PRIVATE, visibility_for_acl(None))

    def test_acl_from_grants(self):
        cases = [
            ([OWNER_GRANT], "private"),
            ([], "private"),
            ([OWNER_GRANT, group_grant(ALL_USERS_URI, "READ")], "public-read"),
            (
                [OWNER_GRANT, group_grant(ALL_USERS_URI, "READ"), group_grant(ALL_USERS_URI, "WRITE")],
                "public-read-write",
            ),
            ([group_grant(ALL_USERS_URI, "FULL_CONTROL")], "public-read-write"),
            ([OWNER_GRANT, group_grant(AUTHENTICATED_USERS_URI, "READ")], "authenticated-read"),
            ([OWNER_GRANT, group_grant(ALL_USERS_URI, "WRITE")], "private"),
        ]
        for grants, expected in cases:
            with self.subTest(expected=expected, grants=grants):
                self.assertEqual(expected, acl_from_grants(grants))


if __name__ == "__main__":
    unittest.main()
