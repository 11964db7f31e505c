"""
Core asset handling logic.

This module is framework-agnostic - it doesn't import FastAPI or boto3.
Payload decoding and key naming are pure functions; the upload flow talks
to storage only through the ObjectStorageBackend protocol, so it can be
tested against an in-memory store.
"""
