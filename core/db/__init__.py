"""
Core Database Components

- managers: tenant-aware querysets
- models: abstract base models
- exceptions: concurrency errors raised by write services
"""

from core.db.managers import TenantAwareManager, TenantAwareQuerySet

__all__ = ['TenantAwareManager', 'TenantAwareQuerySet']
