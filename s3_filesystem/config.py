from __future__ import annotations
"""Per-call configuration and option merging."""
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterator

OPTION_VISIBILITY = "visibility"
OPTION_MIMETYPE = "mimetype"
OPTION_CLIENT_OPTIONS = "options"


def merge_options(base: Mapping[str, Any] | None, override: Mapping[str, Any] | None) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base`` without mutating either.

    Nested mappings are merged key by key, list values are concatenated
    (base first) and any other value in ``override`` replaces the one in
    ``base``.
    """

    merged: dict[str, Any] = {key: _copy_value(value) for key, value in (base or {}).items()}
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_options(current, value)
        elif isinstance(current, list) and isinstance(value, (list, tuple)):
            merged[key] = current + list(value)
        else:
            merged[key] = _copy_value(value)
    return merged


def freeze_options(options: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(merge_options(options, None))


def _copy_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return merge_options(value, None)
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


class Config(Mapping):
    """Read-only options passed to a single adapter call.

    Recognised keys are ``visibility``, ``mimetype`` and ``options``; the
    latter holds raw client keyword arguments that override the adapter's
    instance options for that call only.
    """

    def __init__(self, values: Mapping[str, Any] | None = None, **kwargs: Any):
        self._options = MappingProxyType(merge_options(values, kwargs))

    def __getitem__(self, key: str) -> Any:
        return self._options[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self) -> str:
        return f"Config({dict(self._options)!r})"

    def extend(self, options: Mapping[str, Any]) -> "Config":
        """Return a new config where ``options`` take precedence."""

        return Config(merge_options(self._options, options))

    def with_defaults(self, defaults: Mapping[str, Any]) -> "Config":
        """Return a new config where existing keys take precedence over ``defaults``."""

        return Config(merge_options(defaults, self._options))

    @property
    def client_options(self) -> Mapping[str, Any]:
        return self._options.get(OPTION_CLIENT_OPTIONS) or {}
