"""
Custom error handlers for Mini ATS.

Every handler tags the failure with a short error id, logs it on the client
(4xx) or server (5xx) logger and answers with JSON for API callers or a
rendered error page otherwise. The 500 page offers "try again" and "go to
dashboard" links.
"""

import logging
import sys
import traceback
import uuid

from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import render

logger_client = logging.getLogger('miniats.errors.client')  # 4xx
logger_server = logging.getLogger('miniats.errors.server')  # 5xx

ERROR_TITLES = {
    400: ('Bad Request', 'The request was invalid or malformed.'),
    403: ('Forbidden', 'You do not have permission to access this resource.'),
    404: ('Not Found', 'The page you are looking for does not exist.'),
    500: ('Internal Server Error', 'An unexpected error occurred. Please try again.'),
}


def _new_error_id():
    return str(uuid.uuid4())[:8]


def _user_label(request):
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user.email
    return 'anonymous'


def _is_api_request(request):
    return (
        request.path.startswith('/api/') or
        request.content_type == 'application/json' or
        request.META.get('HTTP_ACCEPT', '').startswith('application/json')
    )


def _dashboard_url(request):
    if getattr(request, 'scope', None) is not None:
        return '/app/dashboard/'
    return '/'


def _respond(request, status_code, error_id):
    title, detail = ERROR_TITLES[status_code]
    if _is_api_request(request):
        return JsonResponse({
            'error': title,
            'status_code': status_code,
            'detail': detail,
            'error_id': error_id,
        }, status=status_code)

    context = {
        'title': title,
        'message': detail,
        'error_id': error_id,
        'request_path': request.path,
        'dashboard_url': _dashboard_url(request),
        'support_email': settings.SUPPORT_EMAIL,
    }
    return render(request, f'errors/{status_code}.html', context, status=status_code)


def _client_error(request, exception, status_code):
    error_id = _new_error_id()
    logger_client.warning(
        '%s (%s): %s | Path: %s | Error ID: %s | User: %s',
        ERROR_TITLES[status_code][0],
        status_code,
        str(exception) if exception else '-',
        request.path,
        error_id,
        _user_label(request),
    )
    return _respond(request, status_code, error_id)


def handler400(request, exception=None):
    return _client_error(request, exception, 400)


def handler403(request, exception=None):
    return _client_error(request, exception, 403)


def handler404(request, exception=None):
    return _client_error(request, exception, 404)


def handler500(request):
    error_id = _new_error_id()
    exc_type, exc_value, exc_tb = sys.exc_info()
    logger_server.error(
        'Internal Server Error (500) | Error ID: %s | Path: %s | User: %s\n%s',
        error_id,
        request.path,
        _user_label(request),
        ''.join(traceback.format_exception(exc_type, exc_value, exc_tb)) if exc_type else 'No exception info',
    )
    return _respond(request, 500, error_id)
