"""
Storage key and content-type resolution.

Keys are UTC timestamps at millisecond precision followed by an extension:

    20261019T142530123.png

The timestamp is taken when the key is generated, not when the request
arrived. KeyClock never hands out the same millisecond twice within a
process, so back-to-back uploads cannot collide on a key.
"""

import os
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .models import DEFAULT_CONTENT_TYPE, StorageKey


KEY_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"

VECTOR_EXTENSION = "svg"
RASTER_EXTENSION = "png"
VECTOR_CONTENT_TYPE = "image/svg+xml"
RASTER_CONTENT_TYPE = "image/png"

PUBLIC_URL_TEMPLATE = "https://{bucket}.s3.{region}.amazonaws.com/{key}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class KeyClock:
    """
    Source of key timestamps.
    
    Truncates to milliseconds and, if the wall clock has not advanced
    (or went backwards) since the last key, steps one millisecond past
    the previous value.
    """
    
    def __init__(self, now: Callable[[], datetime] = _utc_now) -> None:
        self._now = now
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()
    
    def next_timestamp(self) -> datetime:
        with self._lock:
            current = self._now().astimezone(timezone.utc)
            current = current.replace(microsecond=current.microsecond // 1000 * 1000)
            if self._last is not None and current <= self._last:
                current = self._last + timedelta(milliseconds=1)
            self._last = current
            return current


def format_key_timestamp(moment: datetime) -> str:
    """Format as yyyyMMddTHHmmssfff in UTC."""
    moment = moment.astimezone(timezone.utc)
    return f"{moment.strftime(KEY_TIMESTAMP_FORMAT)}{moment.microsecond // 1000:03d}"


def build_key_name(moment: datetime, extension: str) -> str:
    """Join timestamp and extension; an empty extension gives a bare timestamp."""
    extension = extension.lstrip(".")
    stamp = format_key_timestamp(moment)
    return f"{stamp}.{extension}" if extension else stamp


# ---------------------------------------------------------------------------
# Image uploads: vector or raster, nothing else
# ---------------------------------------------------------------------------

def image_extension(marker: Optional[str]) -> str:
    if marker and VECTOR_EXTENSION.upper() in marker.upper():
        return VECTOR_EXTENSION
    return RASTER_EXTENSION


def image_content_type(key_name: str) -> str:
    if key_name.endswith(f".{VECTOR_EXTENSION}"):
        return VECTOR_CONTENT_TYPE
    return RASTER_CONTENT_TYPE


def resolve_image_key(moment: datetime, marker: Optional[str]) -> StorageKey:
    name = build_key_name(moment, image_extension(marker))
    return StorageKey(name=name, content_type=image_content_type(name))


# ---------------------------------------------------------------------------
# Generic files: extension from the caller's name, type from the marker
# ---------------------------------------------------------------------------

def file_extension(file_name: str) -> str:
    """
    Extension of the caller-supplied file name, including the dot.
    
    Everything after the last dot of the base name counts, so dotfiles
    like ".env" keep their whole name as the extension. A trailing dot or
    no dot at all gives "".
    """
    _, dot, ext = os.path.basename(file_name).rpartition(".")
    return f".{ext}" if dot and ext else ""


def resolve_file_key(
    moment: datetime,
    file_name: str,
    declared_type: Optional[str],
) -> StorageKey:
    return StorageKey(
        name=build_key_name(moment, file_extension(file_name)),
        content_type=declared_type or DEFAULT_CONTENT_TYPE,
    )


def build_asset_url(bucket: str, region: str, key: str) -> str:
    """Public virtual-hosted-style URL of an object."""
    return PUBLIC_URL_TEMPLATE.format(bucket=bucket, region=region, key=key)
