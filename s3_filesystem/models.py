from __future__ import annotations
"""Attribute models produced by the filesystem adapter."""
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional, Union


class Visibility:
    """The two visibility values exposed to filesystem consumers."""

    PUBLIC = "public"
    PRIVATE = "private"


def _freeze(attributes: Any) -> None:
    # extra_metadata is read-only and left out of the hash.
    object.__setattr__(attributes, "extra_metadata", MappingProxyType(dict(attributes.extra_metadata)))


@dataclass(frozen=True)
class FileAttributes:
    """Metadata about a single stored object."""

    path: str
    file_size: Optional[int] = None
    visibility: Optional[str] = None
    last_modified: Optional[int] = None
    mime_type: Optional[str] = None
    extra_metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    is_file = True
    is_dir = False

    def __post_init__(self) -> None:
        _freeze(self)


@dataclass(frozen=True)
class DirectoryAttributes:
    """A common key prefix presented as a directory."""

    path: str
    visibility: Optional[str] = None
    last_modified: Optional[int] = None
    extra_metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    is_file = False
    is_dir = True

    def __post_init__(self) -> None:
        _freeze(self)


StorageAttributes = Union[FileAttributes, DirectoryAttributes]
