"""
Infrastructure layer - external service integrations.

- storage: Object storage (S3 and S3-compatible)

These wrappers translate between external APIs and what the core needs.
"""
