"""
Domain models for asset uploads.

Payload classification produces one of three explicit results instead of
overloading a single string: decoded bytes, a value to hand back as-is, or
nothing at all. Callers branch on the type, never on string content.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


DEFAULT_CONTENT_TYPE = "application/octet-stream"


class AssetKind(Enum):
    """Which upload flow a payload goes through."""
    IMAGE = "image"
    FILE = "file"


class ReplaceProgress(Enum):
    """
    How far a (possibly replacing) upload got before it stopped.
    
    Deleting the old object and writing the new one are two separate
    backend calls, so a failure can leave either state behind.
    """
    NOTHING_DONE = "nothing_done"
    OLD_DELETED = "old_deleted"  # old object gone, new write pending or failed


@dataclass(frozen=True)
class DecodedPayload:
    """
    Binary content recovered from a base64 payload.
    
    `marker` is the raw text before the first comma of a data URL
    (e.g. "data:image/svg+xml;base64"), or None for bare base64.
    """
    data: bytes
    marker: Optional[str] = None
    
    @property
    def declared_type(self) -> Optional[str]:
        """Content type declared by the data URL marker, if any."""
        if self.marker is None:
            return None
        declared = self.marker.replace("data:", "").replace(";base64", "").strip()
        return declared or None
    
    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class PassThrough:
    """A value that is already a final reference, e.g. a previously returned URL."""
    value: str


@dataclass(frozen=True)
class EmptyPayload:
    """No asset was supplied (empty string or the "no file" sentinel)."""


ClassifiedPayload = Union[DecodedPayload, PassThrough, EmptyPayload]


@dataclass(frozen=True)
class StorageKey:
    """Generated object key plus the content type it will be stored with."""
    name: str
    content_type: str
    
    @property
    def extension(self) -> str:
        _, dot, ext = self.name.rpartition(".")
        return ext if dot else ""
