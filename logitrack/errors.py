# logitrack/errors.py
"""
Error taxonomy shared by the store adapters, services and routers.
Services log and re-raise; routers translate these into HTTP responses
(see the exception handlers in logitrack.main).
"""


class LogitrackError(Exception):
    """Base class for errors raised by this package."""


class FormValidationError(LogitrackError):
    """Form input failed a validation schema. Never reaches the store."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid fields: {fields}")


class DuplicateKeyError(LogitrackError):
    """A conditional insert hit an existing unique value."""

    def __init__(self, collection: str, field: str, value):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(f"{collection}.{field} '{value}' already exists")


class DocumentNotFoundError(LogitrackError):
    """An update targeted a document that does not exist."""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


class TimestampShapeError(LogitrackError, ValueError):
    """A stored value is not one of the known timestamp shapes."""


class AuthorizationError(LogitrackError):
    """Caller is not signed in (unauthenticated) or lacks a claim (permission-denied)."""

    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(message)


class InvalidArgumentError(LogitrackError):
    """A privileged call was made without a required argument."""
