from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Course(ApiModel):
    id: int
    name: Optional[str] = None
    department: Optional[str] = None
    code: Optional[str] = None
    professor_name: Optional[str] = None


class Student(ApiModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    identification_image_file_name: Optional[str] = None


class AddCourseRequest(ApiModel):
    name: Optional[str] = None
    code: Optional[str] = None
    department: Optional[str] = None
    professor_first_name: Optional[str] = None
    professor_last_name: Optional[str] = None


class UpdateCourseRequest(AddCourseRequest):
    pass


class AddStudentRequest(ApiModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UpdateStudentRequest(AddStudentRequest):
    pass


class AddCourseResponse(BaseModel):
    course: Course
    resource_uri: str


class AddStudentResponse(BaseModel):
    student: Student
    resource_uri: str


class IdentificationImage(BaseModel):
    content: bytes
    file_name: Optional[str] = None
