"""WSGI config for the Mini ATS project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'miniats.settings')

application = get_wsgi_application()
