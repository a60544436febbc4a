class FamilyTreeError(Exception):
    """Base error carrying the HTTP status and a message safe to show clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FamilyTreeError):
    status_code = 400
    default_message = "Invalid request"


class InvalidFormat(ValidationError):
    default_message = "Invalid format"


class Unauthenticated(FamilyTreeError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(FamilyTreeError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(FamilyTreeError):
    status_code = 404
    default_message = "Not found"


class Conflict(FamilyTreeError):
    status_code = 409
    default_message = "Conflict"
