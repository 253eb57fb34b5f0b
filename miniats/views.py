"""
Project-level views: marketing home page and the health check.
"""

import os
import time

from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from django.shortcuts import render

from tenants.models import Plan


def home_view(request):
    plans = Plan.objects.filter(is_public=True).order_by('sort_order')
    return render(request, 'marketing/home.html', {'plans': plans})


def missing_env_vars():
    return [name for name in settings.REQUIRED_ENV_VARS if not os.environ.get(name)]


def health_check(request):
    """
    Health check endpoint for load balancers and monitoring.

    Reports the database connection and any required environment variable
    that is not set. Responds 200 when healthy and 500 otherwise.
    """
    health_status = {
        'status': 'healthy',
        'timestamp': time.time(),
        'version': getattr(settings, 'APP_VERSION', '1.0.0'),
    }

    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        health_status['database'] = 'connected'
    except Exception as e:
        health_status['database'] = 'error'
        health_status['database_error'] = str(e)
        health_status['status'] = 'unhealthy'

    missing = missing_env_vars()
    health_status['missing_env'] = missing
    if missing:
        health_status['status'] = 'unhealthy'

    status_code = 200 if health_status['status'] == 'healthy' else 500
    return JsonResponse(health_status, status=status_code)
