"""
Tests for upload validation and blob-store naming.
"""

import re

import pytest
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile

from core.storage import generate_upload_name, store_upload
from core.validators import FileValidator, validate_file_upload


def upload(name, content=b'data', content_type='application/pdf'):
    return SimpleUploadedFile(name, content, content_type=content_type)


class TestValidateFileUpload:

    def test_accepts_pdf_resume(self):
        assert validate_file_upload(upload('cv.pdf')) == (True, None)

    def test_octet_stream_relies_on_extension(self):
        assert validate_file_upload(upload('cv.docx', content_type='application/octet-stream'))[0]

    def test_rejects_extension(self):
        ok, error = validate_file_upload(upload('cv.txt', content_type='text/plain'))

        assert not ok
        assert '.txt' in str(error)

    def test_rejects_mime_type(self):
        ok, _error = validate_file_upload(upload('cv.pdf', content_type='text/html'))
        assert not ok

    def test_rejects_large_file(self, settings):
        settings.RESUME_MAX_UPLOAD_SIZE = 10

        ok, error = validate_file_upload(upload('cv.pdf', content=b'x' * 11))

        assert not ok
        assert 'exceeds' in str(error)

    def test_logo_rules(self):
        assert validate_file_upload(upload('logo.png', content_type='image/png'), file_type='logo')[0]
        assert not validate_file_upload(upload('logo.pdf'), file_type='logo')[0]

    def test_form_validator(self):
        validator = FileValidator('resume')

        validator(upload('cv.pdf'))
        with pytest.raises(ValidationError):
            validator(upload('cv.exe', content_type='application/x-msdownload'))

        assert validator == FileValidator('resume')
        assert validator != FileValidator('logo')


class TestUploadNames:

    def test_generated_name(self):
        name = generate_upload_name('My Resume.pdf', 'resumes/')
        assert re.fullmatch(r'resumes/\d+_My_Resume\.pdf', name)

    def test_path_separators_are_flattened(self):
        assert generate_upload_name('../etc/passwd', 'logos').endswith('_.._etc_passwd')

    def test_store_upload_returns_public_url(self):
        url = store_upload(upload('cv.pdf'), 'resumes')

        assert url.startswith('/media/resumes/')
        assert url.endswith('_cv.pdf')
