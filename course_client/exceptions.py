from typing import List, Optional, Sequence, Tuple


class ApiError(Exception):
    """Any failure talking to the Courses and Students API.

    Raised directly for unexpected statuses, transport errors and bodies that
    cannot be read; the original exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthorizationError(ApiError):
    """The API rejected the credentials (401)"""


class CourseOrStudentNotFoundError(ApiError):
    """The referenced course and/or student does not exist (404)"""


class ApiValidationError(ApiError):
    """The API rejected the request body (422)"""

    def __init__(self, message: str, field_errors: Sequence[Tuple[str, str]] = (),
                 status_code: Optional[int] = 422):
        super().__init__(message, status_code)
        self.field_errors: List[Tuple[str, str]] = list(field_errors)

    @property
    def validation_errors(self) -> List[str]:
        return [message for _, message in self.field_errors]

    def __str__(self):
        lines = [super().__str__(), "Validation Errors:"]
        lines.extend(self.validation_errors)
        return "\n".join(lines)
