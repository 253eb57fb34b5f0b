"""
Billing exceptions, each carrying the HTTP status it maps to.
"""


class BillingError(Exception):
    status_code = 400
    default_message = 'Billing request failed.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BillingNotConfigured(BillingError):
    """Raised when Stripe operations are attempted without a secret key."""

    status_code = 500
    default_message = 'Stripe is not configured.'


class PlanNotFound(BillingError):
    status_code = 400
    default_message = 'Invalid plan.'


class NoBillingCustomer(BillingError):
    status_code = 404
    default_message = 'No Stripe customer found.'
