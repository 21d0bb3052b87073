"""
Typed failures raised by the attempt ledger.

Each carries the HTTP status the API layer answers with. Anything that is not
an ``AttemptError`` (database outages, programming errors) is left to propagate.
"""


class AttemptError(Exception):
    status_code = 400
    code = "attempt_error"
    default_message = "The attempt operation failed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(AttemptError):
    status_code = 404
    code = "not_found"
    default_message = "Not found."


class NotPublishedError(AttemptError):
    status_code = 409
    code = "not_published"
    default_message = "Quiz is not published."


class ConflictError(AttemptError):
    status_code = 409
    code = "conflict"
    default_message = "You have an incomplete attempt for this quiz. Finish or abandon it first."


class ForbiddenError(AttemptError):
    status_code = 403
    code = "forbidden"
    default_message = "This attempt belongs to another student."


class InvalidStateError(AttemptError):
    status_code = 409
    code = "invalid_state"
    default_message = "The attempt is not in a state that allows this operation."


class ValidationError(AttemptError):
    status_code = 400
    code = "validation_error"
    default_message = "Invalid answer."
