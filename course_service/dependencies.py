from fastapi import Request

from .config import Settings
from .service import CourseService


def get_course_service(request: Request) -> CourseService:
    return request.app.state.course_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
