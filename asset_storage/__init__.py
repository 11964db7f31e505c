"""
Asset Storage Service - persists text-encoded uploads in S3-compatible storage.

This package contains the complete application:
- core: Framework-agnostic payload decoding, key naming and upload flow
- infrastructure: Object storage backends (S3 and in-memory)
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
