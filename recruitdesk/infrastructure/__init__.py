"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- snowflake: Database persistence
- storage: Object storage (R2/S3)

`memory` holds in-memory stand-ins used in mock mode and tests.
These wrappers translate between external formats and our domain models.
"""
