from __future__ import annotations
"""Path to object key translation."""

DELIMITER = "/"


def normalize_path(path: str) -> str:
    """Return the object key for ``path`` (leading and trailing slashes trimmed)."""

    return path.strip(DELIMITER)


def directory_prefix(path: str) -> str:
    """Return the key prefix that holds the contents of directory ``path``.

    The bucket root maps to the empty prefix.
    """

    key = normalize_path(path)
    if not key:
        return ""
    return key + DELIMITER


def directory_path(prefix: str) -> str:
    """Return the directory path for a listed common prefix.

    Only the delimiter that closes the prefix is removed, so ``a//`` stays
    distinct from ``a/``.
    """

    if prefix.endswith(DELIMITER):
        return prefix[: -len(DELIMITER)]
    return prefix
