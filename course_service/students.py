from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, Response, UploadFile, status

from .config import Settings
from .dependencies import get_course_service, get_settings
from .middleware import logger
from .models import StudentCreate, StudentResponse, StudentUpdate
from .service import CourseService
from .validation import validate_student_create, validate_student_update

router = APIRouter(prefix="/courses/{course_id:int}/students", tags=["students"])


def _not_found(course_id: int, student_id: Optional[int] = None) -> HTTPException:
    if student_id is None:
        detail = f"Course {course_id} not found"
    else:
        detail = f"Course {course_id} or Student {student_id} not found"
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _content_disposition(file_name: str) -> str:
    quoted = quote(file_name)
    if quoted != file_name:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{file_name}"'


@router.get("", response_model=List[StudentResponse])
def get_all_students(
    course_id: int,
    skip: int = Query(0, ge=0),
    take: Optional[int] = Query(None, ge=0),
    search: Optional[str] = None,
    course_service: CourseService = Depends(get_course_service),
    settings: Settings = Depends(get_settings),
):
    """Get a page of the students enrolled in a course"""
    if take is None:
        take = settings.default_student_take
    students = course_service.list_students(course_id, skip, take, search)
    if students is None:
        raise _not_found(course_id)
    return [StudentResponse.from_student(s) for s in students]


@router.get("/{student_id:int}", response_model=StudentResponse)
def get_student(course_id: int, student_id: int, course_service: CourseService = Depends(get_course_service)):
    """Get a single student of a course"""
    student = course_service.get_student(course_id, student_id)
    if not student:
        raise _not_found(course_id, student_id)
    return StudentResponse.from_student(student)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    course_id: int,
    request: Request,
    response: Response,
    student: StudentCreate = Depends(validate_student_create),
    course_service: CourseService = Depends(get_course_service),
):
    """Enroll a new student in a course"""
    created = course_service.create_student(course_id, student)
    if not created:
        raise _not_found(course_id)
    response.headers["Location"] = str(
        request.url_for("get_student", course_id=course_id, student_id=created.id)
    )
    return StudentResponse.from_student(created)


@router.put("/{student_id:int}", status_code=status.HTTP_204_NO_CONTENT)
def update_student(
    course_id: int,
    student_id: int,
    student: StudentUpdate = Depends(validate_student_update),
    course_service: CourseService = Depends(get_course_service),
):
    """Update a student of a course"""
    if not course_service.update_student(course_id, student_id, student):
        raise _not_found(course_id, student_id)
    return None


@router.delete("/{student_id:int}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(course_id: int, student_id: int, course_service: CourseService = Depends(get_course_service)):
    """Remove a student from a course"""
    if not course_service.delete_student(course_id, student_id):
        raise _not_found(course_id, student_id)
    return None


@router.get("/{student_id:int}/identificationimage")
def get_identification_image(
    course_id: int,
    student_id: int,
    course_service: CourseService = Depends(get_course_service),
):
    """Download a student's identification image"""
    student = course_service.get_student(course_id, student_id)
    if not student:
        raise _not_found(course_id, student_id)
    if student.identification_image is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Student {student_id} has no identification image",
        )
    return Response(
        content=student.identification_image,
        media_type="application/octet-stream",
        headers={"Content-Disposition": _content_disposition(student.identification_image_file_name)},
    )


@router.put("/{student_id:int}/identificationimage", status_code=status.HTTP_204_NO_CONTENT)
async def set_identification_image(
    course_id: int,
    student_id: int,
    file: Optional[UploadFile] = File(None),
    course_service: CourseService = Depends(get_course_service),
    settings: Settings = Depends(get_settings),
):
    """Replace a student's identification image with the uploaded file"""
    if not course_service.get_student(course_id, student_id):
        raise _not_found(course_id, student_id)
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file was uploaded")

    # Read at most one byte past the limit
    image = await file.read(settings.max_image_size + 1)
    if not image or len(image) > settings.max_image_size:
        logger.warning(f"Rejected identification image for student {student_id}: {len(image)} bytes")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Image must be between 1 and {settings.max_image_size} bytes",
        )

    course_service.set_identification_image(course_id, student_id, image, file.filename)
    return None


@router.delete("/{student_id:int}/identificationimage", status_code=status.HTTP_204_NO_CONTENT)
def delete_identification_image(
    course_id: int,
    student_id: int,
    course_service: CourseService = Depends(get_course_service),
):
    """Clear a student's identification image"""
    if not course_service.delete_identification_image(course_id, student_id):
        raise _not_found(course_id, student_id)
    return None
