"""
ATS exceptions.
"""

from core.db.exceptions import ConcurrentModificationError


class InvalidStage(ValueError):
    """Stage name outside the hiring pipeline."""


class StageConflictError(ConcurrentModificationError):
    """The application left the stage the client moved it from."""

    def __init__(self, application_id, expected, actual):
        super().__init__(
            model_name='Application',
            object_id=application_id,
            expected=expected,
            actual=actual,
            message=(
                f"Application {application_id} is in stage {actual!r}, not {expected!r}. "
                "Reload the board and try again."
            ),
        )
