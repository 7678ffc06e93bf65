"""Errors raised by the classroom services.

Each error carries the HTTP status it maps to on the request boundary.
"""


class ClassroomError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ClassroomError):
    status_code = 400


class AuthorizationError(ClassroomError):
    status_code = 403


class NotFoundError(ClassroomError):
    status_code = 404
