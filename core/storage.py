"""
Blob-store helpers.

Uploads are written through `default_storage` (S3 via django-storages in
production, the local filesystem otherwise) under a generated name, and the
public URL is what gets persisted on the owning record.
"""

import logging

from django.core.files.storage import default_storage
from django.utils import timezone

logger = logging.getLogger(__name__)


def generate_upload_name(original_name: str, prefix: str) -> str:
    """
    Build `<prefix>/<timestamp>_<name>` with spaces replaced by underscores.

    The timestamp is in milliseconds so two uploads of the same file name a
    moment apart do not collide.
    """
    timestamp = int(timezone.now().timestamp() * 1000)
    safe_name = (original_name or 'upload').replace(' ', '_').replace('/', '_')
    return f"{prefix.strip('/')}/{timestamp}_{safe_name}"


def store_upload(file, prefix: str) -> str:
    """Save an uploaded file and return its public URL."""
    name = default_storage.save(generate_upload_name(file.name, prefix), file)
    logger.info(f"Stored upload {name}")
    return default_storage.url(name)
