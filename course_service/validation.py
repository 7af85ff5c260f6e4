"""Field-level validation of course and student requests.

Errors are kept as an ordered list of ``(field, message)`` pairs and only
grouped into per-field arrays when the 422 response body is rendered.
"""

from typing import Dict, Iterable, List, NamedTuple, Optional

from .models import CourseCreate, CourseUpdate, StudentCreate, StudentUpdate

MAX_LENGTH = 100


class FieldError(NamedTuple):
    field: str
    message: str


class RequestValidationFailed(Exception):
    """Raised before any mutation when a request body breaks a field rule."""

    def __init__(self, errors: Iterable[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(e.message for e in self.errors))

    def to_dict(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for field, message in self.errors:
            grouped.setdefault(field, []).append(message)
        return grouped


def _required(field: str, value: Optional[str]) -> List[FieldError]:
    if value is None or not value.strip():
        return [FieldError(field, f"'{field}' is required")]
    return _max_length(field, value)


def _max_length(field: str, value: Optional[str]) -> List[FieldError]:
    if value is not None and len(value) > MAX_LENGTH:
        return [FieldError(field, f"Max length of '{field}' is {MAX_LENGTH}")]
    return []


def course_errors(request: CourseCreate) -> List[FieldError]:
    return (
        _required("Name", request.name)
        + _max_length("Code", request.code)
        + _max_length("Department", request.department)
        + _max_length("ProfessorFirstName", request.professor_first_name)
        + _max_length("ProfessorLastName", request.professor_last_name)
    )


def student_errors(request: StudentCreate) -> List[FieldError]:
    return _required("FirstName", request.first_name) + _required("LastName", request.last_name)


# FastAPI dependencies: parse the body, then apply the rules

def validate_course_create(course: CourseCreate) -> CourseCreate:
    errors = course_errors(course)
    if errors:
        raise RequestValidationFailed(errors)
    return course


def validate_course_update(course: CourseUpdate) -> CourseUpdate:
    errors = course_errors(course)
    if errors:
        raise RequestValidationFailed(errors)
    return course


def validate_student_create(student: StudentCreate) -> StudentCreate:
    errors = student_errors(student)
    if errors:
        raise RequestValidationFailed(errors)
    return student


def validate_student_update(student: StudentUpdate) -> StudentUpdate:
    errors = student_errors(student)
    if errors:
        raise RequestValidationFailed(errors)
    return student
