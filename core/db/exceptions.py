"""
Database exceptions raised by write services.
"""


class ConcurrentModificationError(Exception):
    """
    Raised when a row changed between the moment a client read it and the
    moment it tried to write it back.

    Attributes:
        model_name: The name of the model class.
        object_id: The primary key of the object.
        expected: The value the client believed was stored.
        actual: The value actually found in the database.
    """

    def __init__(self, model_name=None, object_id=None, expected=None, actual=None, message=None):
        self.model_name = model_name
        self.object_id = object_id
        self.expected = expected
        self.actual = actual

        if message:
            self.message = message
        else:
            self.message = (
                f"Concurrent modification detected for {model_name} "
                f"(id={object_id}). Expected {expected!r}, found {actual!r}."
            )

        super().__init__(self.message)
