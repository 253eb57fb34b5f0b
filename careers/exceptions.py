"""
Careers exceptions.
"""


class ApplicationRejected(Exception):
    """An application that cannot be accepted; `message` is shown to the candidate."""

    default_message = 'Your application could not be submitted.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AlreadyApplied(ApplicationRejected):
    default_message = 'You have already applied to this job.'


class ApplicationsClosed(ApplicationRejected):
    default_message = 'This job is not accepting applications right now.'
