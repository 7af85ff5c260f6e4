from typing import List, Optional

from .data_service import CourseDataService
from .models import (
    Course,
    CourseCreate,
    CourseUpdate,
    Professor,
    Student,
    StudentCreate,
    StudentUpdate,
)


def _course_from_request(course_data: CourseCreate, course_id: int = 0) -> Course:
    return Course(
        id=course_id,
        name=course_data.name,
        code=course_data.code,
        department=course_data.department,
        professor=Professor(
            first_name=course_data.professor_first_name,
            last_name=course_data.professor_last_name,
        ),
    )


def _student_from_request(student_data: StudentCreate, student_id: int = 0) -> Student:
    return Student(id=student_id, first_name=student_data.first_name, last_name=student_data.last_name)


class CourseService:
    """Course and student operations on top of the store.

    Absent courses or students come back as ``None``/``False``; the HTTP
    layer decides what that means for the response.
    """

    def __init__(self, data_service: Optional[CourseDataService] = None):
        self.data_service = data_service or CourseDataService()

    # Courses

    def list_courses(self, skip: int, take: int, search: Optional[str]) -> List[Course]:
        return self.data_service.get_course_list(skip, take, search)

    def get_course(self, course_id: int) -> Optional[Course]:
        return self.data_service.get_course(course_id)

    def create_course(self, course_data: CourseCreate) -> Course:
        course_id = self.data_service.add_course(_course_from_request(course_data))
        return self.data_service.get_course(course_id)

    def update_course(self, course_id: int, course_data: CourseUpdate) -> bool:
        if not self.data_service.course_exists(course_id):
            return False
        self.data_service.update_course(_course_from_request(course_data, course_id))
        return True

    def delete_course(self, course_id: int) -> bool:
        if not self.data_service.course_exists(course_id):
            return False
        self.data_service.delete_course(course_id)
        return True

    # Students

    def list_students(self, course_id: int, skip: int, take: int,
                      search: Optional[str]) -> Optional[List[Student]]:
        if not self.data_service.course_exists(course_id):
            return None
        return self.data_service.get_students_in_course_list(course_id, skip, take, search)

    def get_student(self, course_id: int, student_id: int) -> Optional[Student]:
        return self.data_service.get_student_in_course(course_id, student_id)

    def create_student(self, course_id: int, student_data: StudentCreate) -> Optional[Student]:
        if not self.data_service.course_exists(course_id):
            return None
        student_id = self.data_service.add_student_to_course(course_id, _student_from_request(student_data))
        return self.data_service.get_student_in_course(course_id, student_id)

    def update_student(self, course_id: int, student_id: int, student_data: StudentUpdate) -> bool:
        if not self.data_service.student_exists_in_course(course_id, student_id):
            return False
        self.data_service.update_student_in_course(course_id, _student_from_request(student_data, student_id))
        return True

    def delete_student(self, course_id: int, student_id: int) -> bool:
        if not self.data_service.student_exists_in_course(course_id, student_id):
            return False
        self.data_service.delete_student_from_course(course_id, student_id)
        return True

    def set_identification_image(self, course_id: int, student_id: int, image: bytes, file_name: str) -> bool:
        if not self.data_service.student_exists_in_course(course_id, student_id):
            return False
        self.data_service.set_student_identification_image(course_id, student_id, image, file_name)
        return True

    def delete_identification_image(self, course_id: int, student_id: int) -> bool:
        if not self.data_service.student_exists_in_course(course_id, student_id):
            return False
        self.data_service.delete_student_identification_image(course_id, student_id)
        return True
