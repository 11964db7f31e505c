"""
Payload classification and decoding.

Clients send assets as text: either bare base64 or a data URL such as
"data:image/png;base64,iVBORw0...". The same field may also carry a URL the
service returned earlier, or the "none.jpg" sentinel meaning "no file".
classify_payload() sorts these apart.

Only payloads that pass strict base64 validation are decoded. Anything
that merely looks like base64 (wrong padding, stray characters) is treated
as a pass-through value rather than being decoded partially.
"""

import base64
import binascii
import logging

from .errors import InvalidPayloadError
from .models import ClassifiedPayload, DecodedPayload, EmptyPayload, PassThrough

logger = logging.getLogger(__name__)


NO_FILE_SENTINEL = "none.jpg"
MARKER_SEPARATOR = ","
DATA_URL_PREFIX = "data:"

_BASE64_WHITESPACE = str.maketrans("", "", " \t\r\n")


def _compact(value: str) -> str:
    """Drop the whitespace line-wrapped base64 carries (MIME, `base64` CLI)."""
    return value.translate(_BASE64_WHITESPACE)


def is_encoded_payload(value: str) -> bool:
    """
    Check whether a string is strictly valid base64.
    
    Spaces, tabs and line breaks are ignored; padding and alphabet are
    not. The empty (or all-whitespace) string is not a payload. No decoded
    data is kept; this is a pure predicate callers can use to pre-validate
    input.
    """
    compact = _compact(value)
    if not compact:
        return False
    try:
        base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        # ValueError covers non-ASCII input
        return False
    return True


def split_marker(raw: str) -> tuple[str | None, str]:
    """Split a data URL on its first comma into (marker, body)."""
    marker, separator, body = raw.partition(MARKER_SEPARATOR)
    if not separator:
        return None, raw
    return marker, body


def is_sentinel(value: str) -> bool:
    """True for values that mean "no file": empty or the sentinel."""
    return not value or value == NO_FILE_SENTINEL


def classify_payload(raw: str, strict: bool = False) -> ClassifiedPayload:
    """
    Classify a client payload.
    
    Returns DecodedPayload for valid base64 (with or without a data URL
    marker), EmptyPayload for "" and the sentinel, and PassThrough with the
    original string for everything else.
    
    With strict=True, a data URL whose body fails validation raises
    InvalidPayloadError instead of passing through.
    """
    marker, body = split_marker(raw)
    
    if is_encoded_payload(body):
        return DecodedPayload(data=base64.b64decode(_compact(body), validate=True), marker=marker)
    
    if is_sentinel(body):
        return EmptyPayload()
    
    if strict and marker is not None and marker.startswith(DATA_URL_PREFIX):
        raise InvalidPayloadError(f"Data URL body is not valid base64 (marker: {marker!r})")
    
    logger.debug(
        "Payload is not encoded content, passing through",
        extra={"length": len(raw), "has_marker": marker is not None},
    )
    return PassThrough(raw)
