"""
Upload validators.

Resumes and company logos are checked for size and extension before they are
handed to the blob store.
"""

import os
from typing import Optional, Set, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils.deconstruct import deconstructible
from django.utils.translation import gettext_lazy as _

ALLOWED_EXTENSIONS = {
    'resume': {'.pdf', '.doc', '.docx'},
    'logo': {'.png', '.jpg', '.jpeg', '.webp', '.svg'},
}

ALLOWED_MIME_TYPES = {
    'resume': {
        'application/pdf',
        'application/msword',
        'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    },
    'logo': {'image/png', 'image/jpeg', 'image/webp', 'image/svg+xml'},
}


def _max_size(file_type: str) -> int:
    if file_type == 'logo':
        return getattr(settings, 'LOGO_MAX_UPLOAD_SIZE', 2 * 1024 * 1024)
    return getattr(settings, 'RESUME_MAX_UPLOAD_SIZE', 5 * 1024 * 1024)


def validate_file_upload(
    file,
    file_type: str = 'resume',
    max_size: Optional[int] = None,
    allowed_extensions: Optional[Set[str]] = None,
) -> Tuple[bool, Optional[str]]:
    """
    Validate an uploaded file.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not file:
        return True, None

    if max_size is None:
        max_size = _max_size(file_type)
    if allowed_extensions is None:
        allowed_extensions = ALLOWED_EXTENSIONS.get(file_type, set())

    if file.size > max_size:
        max_mb = max_size / (1024 * 1024)
        return False, _('File size exceeds maximum of %(size).0fMB') % {'size': max_mb}

    ext = os.path.splitext((file.name or '').lower())[1]
    if allowed_extensions and ext not in allowed_extensions:
        return False, _("File extension '%(ext)s' not allowed. Allowed: %(allowed)s") % {
            'ext': ext or '?',
            'allowed': ', '.join(sorted(allowed_extensions)),
        }

    content_type = getattr(file, 'content_type', None)
    allowed_mime_types = ALLOWED_MIME_TYPES.get(file_type, set())
    # Browsers send octet-stream for unknown types; the extension check covers it.
    if (
        content_type
        and content_type != 'application/octet-stream'
        and allowed_mime_types
        and content_type not in allowed_mime_types
    ):
        return False, _("File type '%(type)s' not allowed") % {'type': content_type}

    return True, None


@deconstructible
class FileValidator:
    """
    Django form validator for file uploads.

    Usage:
        resume = forms.FileField(validators=[FileValidator('resume')])
    """

    def __init__(self, file_type: str = 'resume', max_size: Optional[int] = None):
        self.file_type = file_type
        self.max_size = max_size

    def __call__(self, file) -> None:
        is_valid, error = validate_file_upload(file, file_type=self.file_type, max_size=self.max_size)
        if not is_valid:
            raise ValidationError(error)

    def __eq__(self, other):
        return (
            isinstance(other, FileValidator)
            and self.file_type == other.file_type
            and self.max_size == other.max_size
        )
