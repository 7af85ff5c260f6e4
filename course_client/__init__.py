"""Async client for the Courses and Students API."""

from .client import CoursesAndStudentsApiClient
from .exceptions import ApiError, ApiValidationError, AuthorizationError, CourseOrStudentNotFoundError
from .models import (
    AddCourseRequest,
    AddCourseResponse,
    AddStudentRequest,
    AddStudentResponse,
    Course,
    IdentificationImage,
    Student,
    UpdateCourseRequest,
    UpdateStudentRequest,
)

__all__ = [
    "CoursesAndStudentsApiClient",
    "ApiError",
    "ApiValidationError",
    "AuthorizationError",
    "CourseOrStudentNotFoundError",
    "AddCourseRequest",
    "AddCourseResponse",
    "AddStudentRequest",
    "AddStudentResponse",
    "Course",
    "IdentificationImage",
    "Student",
    "UpdateCourseRequest",
    "UpdateStudentRequest",
]
