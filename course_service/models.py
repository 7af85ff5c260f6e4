from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional


class Professor(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class Student(BaseModel):
    id: int = 0
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    identification_image: Optional[bytes] = None
    identification_image_file_name: Optional[str] = None


class Course(BaseModel):
    id: int = 0
    name: Optional[str] = None
    department: Optional[str] = None
    code: Optional[str] = None
    professor: Optional[Professor] = None
    students: List[Student] = Field(default_factory=list)


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CourseCreate(ApiModel):
    name: Optional[str] = None
    code: Optional[str] = None
    department: Optional[str] = None
    professor_first_name: Optional[str] = None
    professor_last_name: Optional[str] = None


class CourseUpdate(CourseCreate):
    pass


class StudentCreate(ApiModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class StudentUpdate(StudentCreate):
    pass


class CourseResponse(ApiModel):
    id: int
    name: Optional[str] = None
    department: Optional[str] = None
    code: Optional[str] = None
    professor_name: Optional[str] = None

    @classmethod
    def from_course(cls, course: Course) -> "CourseResponse":
        professor_name = None
        if course.professor is not None:
            professor_name = f"{course.professor.first_name or ''} {course.professor.last_name or ''}"
        return cls(
            id=course.id,
            name=course.name,
            department=course.department,
            code=course.code,
            professor_name=professor_name,
        )


class StudentResponse(ApiModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    identification_image_file_name: Optional[str] = None

    @classmethod
    def from_student(cls, student: Student) -> "StudentResponse":
        return cls(
            id=student.id,
            first_name=student.first_name,
            last_name=student.last_name,
            identification_image_file_name=student.identification_image_file_name,
        )
