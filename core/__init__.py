"""
Core - shared infrastructure for the Mini ATS apps.

- Base models with timestamps and company scoping
- Tenant-aware querysets
- Upload validation and blob-store helpers
"""
