"""
Errors raised by the asset upload flow.

Every backend failure reaches callers as StorageOperationFailed, labelled
with the operation that was running. Malformed payloads are normally not an
error at all (they pass through unchanged); InvalidPayloadError only exists
for the opt-in strict mode.
"""

from .models import ReplaceProgress


UPLOADING_IMAGE = "uploading image"
UPLOADING_FILE = "uploading file"
DELETING_FILE = "deleting file"


class InvalidPayloadError(ValueError):
    """Raised in strict mode when a data URL carries an undecodable body."""
    pass


class StorageOperationFailed(Exception):
    """
    A write or delete against object storage failed.
    
    The original exception is kept both as `cause` and as __cause__.
    `progress` tells a caller of a replacing upload whether the old
    object was already deleted when the failure happened.
    """
    
    def __init__(
        self,
        operation: str,
        cause: BaseException,
        progress: ReplaceProgress = ReplaceProgress.NOTHING_DONE,
    ) -> None:
        super().__init__(f"Error {operation}: {cause}")
        self.operation = operation
        self.cause = cause
        self.progress = progress
