from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from .config import Settings
from .dependencies import get_course_service, get_settings
from .models import CourseCreate, CourseResponse, CourseUpdate
from .service import CourseService
from .validation import validate_course_create, validate_course_update

router = APIRouter(prefix="/courses", tags=["courses"])


def _course_not_found(course_id: int) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Course {course_id} not found")


@router.get("", response_model=List[CourseResponse])
def get_all_courses(
    skip: int = Query(0, ge=0),
    take: Optional[int] = Query(None, ge=0),
    search: Optional[str] = None,
    course_service: CourseService = Depends(get_course_service),
    settings: Settings = Depends(get_settings),
):
    """Get a page of courses, optionally filtered by a search string"""
    if take is None:
        take = settings.default_course_take
    courses = course_service.list_courses(skip, take, search)
    return [CourseResponse.from_course(c) for c in courses]


@router.get("/{course_id:int}", response_model=CourseResponse)
def get_course(course_id: int, course_service: CourseService = Depends(get_course_service)):
    """Get a course by ID"""
    course = course_service.get_course(course_id)
    if not course:
        raise _course_not_found(course_id)
    return CourseResponse.from_course(course)


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    request: Request,
    response: Response,
    course: CourseCreate = Depends(validate_course_create),
    course_service: CourseService = Depends(get_course_service),
):
    """Create a new course"""
    created = course_service.create_course(course)
    response.headers["Location"] = str(request.url_for("get_course", course_id=created.id))
    return CourseResponse.from_course(created)


@router.put("/{course_id:int}", status_code=status.HTTP_204_NO_CONTENT)
def update_course(
    course_id: int,
    course: CourseUpdate = Depends(validate_course_update),
    course_service: CourseService = Depends(get_course_service),
):
    """Update a course"""
    if not course_service.update_course(course_id, course):
        raise _course_not_found(course_id)
    return None


@router.delete("/{course_id:int}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(course_id: int, course_service: CourseService = Depends(get_course_service)):
    """Delete a course"""
    if not course_service.delete_course(course_id):
        raise _course_not_found(course_id)
    return None
