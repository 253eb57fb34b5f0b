"""
Tenants exceptions.
"""


class TenantError(Exception):
    """Base class for company/team errors surfaced to the user."""

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    default_message = 'Operation not allowed.'


class PlanLimitExceeded(TenantError):
    default_message = 'Your plan limit has been reached. Upgrade to add more.'


class DuplicateInvitation(TenantError):
    default_message = 'This email has already been invited.'


class InvalidInvitation(TenantError):
    default_message = 'This invitation is invalid or has already been used.'


class AlreadyMember(TenantError):
    default_message = 'This account already belongs to a company.'


class PermissionDenied(TenantError):
    default_message = 'You do not have permission to perform this action.'
