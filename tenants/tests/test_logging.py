"""
Tests for the tenant-aware logging filter and formatter.
"""

import logging

import pytest

from tenants.context import tenant_context
from tenants.logging import TenantContextFilter, TenantFormatter


def make_record(message='hello'):
    return logging.LogRecord('miniats.test', logging.INFO, __file__, 1, message, None, None)


class TestTenantLogging:

    def test_outside_a_company(self):
        record = make_record()

        assert TenantContextFilter().filter(record)
        assert record.tenant_slug == 'public'
        assert record.user_id is None

    @pytest.mark.django_db
    def test_inside_a_company(self, scope):
        record = make_record()

        with tenant_context(scope):
            TenantContextFilter().filter(record)

        assert record.tenant_slug == 'acme'
        assert record.user_id == scope.user.pk

    def test_formatter_prefixes_slug(self):
        output = TenantFormatter().format(make_record('job created'))
        assert '[tenant:public] miniats.test: job created' in output
