from __future__ import annotations
"""Adapter settings persistence helpers."""

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Any, Optional

LOGGER = logging.getLogger(__name__)


@dataclass
class AdapterSettings:
    """Simple container for the settings an adapter is built from.

    ``profile`` names a profile in the shared AWS config files; credentials
    are never stored here.
    """

    bucket: str = ""
    profile: str = ""
    endpoint_url: str = ""
    region_name: str = ""
    options: dict[str, Any] = field(default_factory=dict)
    page_size: Optional[int] = None


class SettingsStorage:
    """JSON-backed persistence for :class:`AdapterSettings`."""

    def __init__(self, storage_path: str | Path | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".pys3fs_settings.json"
        self._path = Path(storage_path)

    def load(self) -> AdapterSettings:
        if not self._path.exists():
            return AdapterSettings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("Ignoring unreadable settings file '%s'", self._path)
            return AdapterSettings()
        if not isinstance(data, dict):
            return AdapterSettings()

        bucket = data.get("bucket", "")
        profile = data.get("profile", "")
        endpoint_url = data.get("endpoint_url", "")
        region_name = data.get("region_name", "")
        options = data.get("options", {})
        return AdapterSettings(
            bucket=bucket if isinstance(bucket, str) else "",
            profile=profile if isinstance(profile, str) else "",
            endpoint_url=endpoint_url if isinstance(endpoint_url, str) else "",
            region_name=region_name if isinstance(region_name, str) else "",
            options=options if isinstance(options, dict) else {},
            page_size=_sanitize_page_size(data.get("page_size")),
        )

    def save(self, settings: AdapterSettings) -> None:
        payload = {
            "bucket": settings.bucket,
            "profile": settings.profile,
            "endpoint_url": settings.endpoint_url,
            "region_name": settings.region_name,
            "options": dict(settings.options),
            "page_size": _sanitize_page_size(settings.page_size),
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError:
            # Persist best-effort; ignore filesystem issues.
            LOGGER.warning("Unable to save settings to '%s'", self._path)
            return


def _sanitize_page_size(value: object) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        page_size = int(value)
    except (TypeError, ValueError):
        return None
    if page_size <= 0:
        return None
    # S3 never returns more than 1000 keys per page.
    return min(page_size, 1000)
