import threading
from typing import List, Optional

from .models import Course, Professor, Student


def _seed_courses() -> List[Course]:
    return [
        Course(
            id=1, name="Introduction to Computer Science", code="CS-101", department="Computer Science",
            professor=Professor(first_name="John", last_name="Smith"),
            students=[
                Student(id=1, first_name="John", last_name="Doe"),
                Student(id=2, first_name="Jane", last_name="Doe"),
            ],
        ),
        Course(
            id=2, name="Introduction to Biology", code="BIO-101", department="Life Sciences",
            professor=Professor(first_name="Jane", last_name="Smith"),
            students=[
                Student(id=3, first_name="Ray", last_name="Doe"),
                Student(id=4, first_name="Karen", last_name="Doe"),
            ],
        ),
        Course(
            id=3, name="Writing", code="ENG-101", department="Languages",
            professor=Professor(first_name="June", last_name="Smith"),
            students=[
                Student(id=5, first_name="Jim", last_name="Doe"),
                Student(id=6, first_name="Erin", last_name="Doe"),
            ],
        ),
    ]


def _matches(search: Optional[str], *fields: Optional[str]) -> bool:
    if search is None or not search.strip():
        return True
    needle = search.casefold()
    return any(needle in (field or "").casefold() for field in fields)


class CourseDataService:
    """In-memory store of courses and the students enrolled in them.

    Course ids and student ids are both assigned as ``max + 1``. Student ids
    are drawn from the maximum across every course, so they are unique for
    the whole store rather than per course.

    Lookups return ``None`` for absent entities. Deletes and updates expect the
    caller to have checked existence first and raise ``KeyError`` otherwise.
    """

    def __init__(self, courses: Optional[List[Course]] = None):
        self.courses = _seed_courses() if courses is None else list(courses)
        self._lock = threading.Lock()

    # Courses

    def course_exists(self, course_id: int) -> bool:
        return any(c.id == course_id for c in self.courses)

    def get_course_count(self) -> int:
        return len(self.courses)

    def add_course(self, course: Course) -> int:
        with self._lock:
            course.id = max((c.id for c in self.courses), default=0) + 1
            if course.students:
                next_student_id = self._max_student_id()
                for student in course.students:
                    next_student_id += 1
                    student.id = next_student_id
            self.courses.append(course)
            return course.id

    def delete_course(self, course_id: int) -> None:
        with self._lock:
            self.courses.remove(self._require_course(course_id))

    def get_course(self, course_id: int) -> Optional[Course]:
        return next((c for c in self.courses if c.id == course_id), None)

    def update_course(self, course: Course) -> None:
        with self._lock:
            course_to_update = self._require_course(course.id)
            course_to_update.name = course.name
            course_to_update.code = course.code
            course_to_update.department = course.department
            if course_to_update.professor is None:
                course_to_update.professor = Professor()
            professor = course.professor or Professor()
            course_to_update.professor.first_name = professor.first_name
            course_to_update.professor.last_name = professor.last_name

    def get_course_list(self, skip: int, take: int, search: Optional[str]) -> List[Course]:
        courses = [
            c for c in sorted(self.courses, key=lambda c: c.id)
            if _matches(
                search,
                c.name,
                c.department,
                c.professor.first_name if c.professor else None,
                c.professor.last_name if c.professor else None,
            )
        ]
        return courses[skip:skip + take]

    # Students

    def student_exists_in_course(self, course_id: int, student_id: int) -> bool:
        return self.get_student_in_course(course_id, student_id) is not None

    def get_student_count(self, course_id: int) -> int:
        return sum(len(c.students) for c in self.courses if c.id == course_id)

    def add_student_to_course(self, course_id: int, student: Student) -> int:
        with self._lock:
            course = self._require_course(course_id)
            student.id = self._max_student_id() + 1
            course.students.append(student)
            return student.id

    def delete_student_from_course(self, course_id: int, student_id: int) -> None:
        with self._lock:
            course = self._require_course(course_id)
            course.students.remove(self._require_student(course_id, student_id))

    def get_student_in_course(self, course_id: int, student_id: int) -> Optional[Student]:
        course = self.get_course(course_id)
        if course is None:
            return None
        return next((s for s in course.students if s.id == student_id), None)

    def update_student_in_course(self, course_id: int, student: Student) -> None:
        with self._lock:
            student_to_update = self._require_student(course_id, student.id)
            student_to_update.first_name = student.first_name
            student_to_update.last_name = student.last_name

    def get_students_in_course_list(self, course_id: int, skip: int, take: int,
                                    search: Optional[str]) -> List[Student]:
        course = self._require_course(course_id)
        students = [
            s for s in sorted(course.students, key=lambda s: s.id)
            if _matches(search, s.first_name, s.last_name)
        ]
        return students[skip:skip + take]

    def set_student_identification_image(self, course_id: int, student_id: int,
                                         image: bytes, file_name: str) -> None:
        with self._lock:
            student = self._require_student(course_id, student_id)
            student.identification_image = image
            student.identification_image_file_name = file_name

    def delete_student_identification_image(self, course_id: int, student_id: int) -> None:
        with self._lock:
            student = self._require_student(course_id, student_id)
            student.identification_image = None
            student.identification_image_file_name = None

    def _max_student_id(self) -> int:
        return max((s.id for c in self.courses for s in c.students), default=0)

    def _require_course(self, course_id: int) -> Course:
        course = self.get_course(course_id)
        if course is None:
            raise KeyError(f"Course {course_id} not found")
        return course

    def _require_student(self, course_id: int, student_id: int) -> Student:
        student = self.get_student_in_course(course_id, student_id)
        if student is None:
            raise KeyError(f"Student {student_id} not found in course {course_id}")
        return student
