class WireError(Exception):
    """Base class for wire model errors."""


class InvalidRoleError(WireError, ValueError):
    def __init__(self, role: str):
        super().__init__(f"Invalid role: {role!r}")
        self.role = role


class SchemaViolationError(WireError, ValueError):
    """A JSON value does not match the shape expected for a field or payload."""


class MissingContentError(WireError):
    pass


class StructuredContentError(WireError):
    """Raised when text is requested from multi-part (array) content."""
