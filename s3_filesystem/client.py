from __future__ import annotations
"""Builds boto3 clients and adapters from saved settings."""
from typing import Callable
import logging

import boto3
from botocore.client import Config

from .adapter import S3FilesystemAdapter
from .settings import AdapterSettings

LOGGER = logging.getLogger(__name__)


def create_client(settings: AdapterSettings, session_factory: Callable[..., object] | None = None):
    """Return an S3 client for ``settings``.

    Credentials come from boto3's own chain, scoped to the named profile when
    one is set. Empty endpoint and region values fall back to boto3's own
    resolution as well.
    """

    session_factory = session_factory or boto3.Session
    session = session_factory(
        profile_name=settings.profile or None,
        region_name=settings.region_name or None,
    )
    kwargs = {"config": Config(signature_version="s3v4")}
    if settings.endpoint_url:
        kwargs["endpoint_url"] = settings.endpoint_url
    return session.client("s3", **kwargs)


def create_adapter(
    settings: AdapterSettings,
    session_factory: Callable[..., object] | None = None,
) -> S3FilesystemAdapter:
    """Wire the saved settings into an adapter.

    Raises:
        ValueError: when no bucket is configured.
    """

    if not settings.bucket:
        raise ValueError("A bucket name is required to create an adapter")
    LOGGER.debug(
        "Creating adapter for bucket '%s' using profile '%s'",
        settings.bucket,
        settings.profile or "default",
    )
    client = create_client(settings, session_factory)
    return S3FilesystemAdapter(
        client,
        settings.bucket,
        settings.options,
        page_size=settings.page_size,
    )
