import logging
from email.message import Message
from typing import Any, Callable, List, Optional, Tuple

import httpx

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

logger = logging.getLogger("course_client")

DEFAULT_BASE_URL = "http://localhost:8002/"
SUCCESS_STATUS_CODES = frozenset({200, 201, 204})

# Flattening order of the per-field arrays in a 422 body
VALIDATION_FIELDS = ("Name", "Code", "Department", "ProfessorFirstName", "ProfessorLastName")


def extract_validation_errors(body: Any) -> List[Tuple[str, str]]:
    """Flatten the ``errors`` object of a 422 body into ``(field, message)`` pairs.

    Known course fields come first in a fixed order; any other field follows
    in the order the server sent it. Each field keeps its own message order.
    """
    errors = body.get("errors") if isinstance(body, dict) else None
    if not isinstance(errors, dict):
        return []
    ordered = [f for f in VALIDATION_FIELDS if f in errors]
    ordered += [f for f in errors if f not in VALIDATION_FIELDS]
    return [(field, str(message)) for field in ordered for message in (errors[field] or [])]


def check_response(response: httpx.Response, not_found_message: str) -> httpx.Response:
    """Map a response status onto the client's outcomes.

    Returns the response for 200/201/204 and raises otherwise: 401 as
    :class:`AuthorizationError`, 404 as :class:`CourseOrStudentNotFoundError`,
    422 as :class:`ApiValidationError` and anything else as :class:`ApiError`.
    """
    status_code = response.status_code
    if status_code in SUCCESS_STATUS_CODES:
        return response
    if status_code == 401:
        raise AuthorizationError("Bad credentials", status_code)
    if status_code == 404:
        raise CourseOrStudentNotFoundError(not_found_message, status_code)
    if status_code == 422:
        raise ApiValidationError("Invalid input", extract_validation_errors(response.json()), status_code)

    logger.warning(f"Unexpected http status code {status_code} from {response.request.method} {response.request.url}")
    raise ApiError(f"Unexpected http status code: {status_code}", status_code)


def _file_name_from(response: httpx.Response) -> Optional[str]:
    header = response.headers.get("content-disposition")
    if not header:
        return None
    message = Message()
    message["content-disposition"] = header
    return message.get_filename()


class CoursesAndStudentsApiClient:
    """Async client for the Courses and Students API.

    Every call opens its own ``httpx.AsyncClient`` with Basic credentials and
    goes through :meth:`_request`, so all operations share one status mapping.
    Cancelling the awaiting task cancels the HTTP call; cancellation is never
    turned into an :class:`ApiError`.
    """

    def __init__(self, username: str, password: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.username = username
        self.password = password
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    def _create_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=httpx.BasicAuth(self.username, self.password),
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _request(self, method: str, url: str, not_found_message: str,
                       parse: Optional[Callable[[httpx.Response], Any]] = None, **kwargs) -> Any:
        try:
            async with self._create_http_client() as client:
                logger.info(f"{method} {url}")
                response = await client.request(method, url, **kwargs)
                check_response(response, not_found_message)
                return parse(response) if parse else None
        except ApiError:
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error calling {method} {url}: {str(e)}")
            raise ApiError("Unexpected exception") from e
        except Exception as e:
            logger.error(f"Unexpected error calling {method} {url}: {str(e)}")
            raise ApiError("Unexpected exception") from e

    @staticmethod
    def _page_params(skip: Optional[int], take: Optional[int], search: Optional[str]) -> dict:
        params = {"skip": skip, "take": take, "search": search}
        return {k: v for k, v in params.items() if v is not None}

    # Courses

    async def get_courses(self, skip: Optional[int] = None, take: Optional[int] = None,
                          search: Optional[str] = None) -> List[Course]:
        return await self._request(
            "GET", "courses", "Courses not found",
            parse=lambda r: [Course.model_validate(c) for c in r.json()],
            params=self._page_params(skip, take, search),
        )

    async def get_course(self, course_id: int) -> Course:
        return await self._request(
            "GET", f"courses/{course_id}", f"Course {course_id} not found",
            parse=lambda r: Course.model_validate(r.json()),
        )

    async def add_course(self, request: AddCourseRequest) -> AddCourseResponse:
        return await self._request(
            "POST", "courses", "Courses not found",
            parse=lambda r: AddCourseResponse(
                course=Course.model_validate(r.json()),
                resource_uri=r.headers["location"],
            ),
            json=request.model_dump(by_alias=True),
        )

    async def update_course(self, course_id: int, request: UpdateCourseRequest) -> None:
        await self._request(
            "PUT", f"courses/{course_id}", f"Course {course_id} not found",
            json=request.model_dump(by_alias=True),
        )

    async def delete_course(self, course_id: int) -> None:
        await self._request("DELETE", f"courses/{course_id}", f"Course {course_id} not found")

    # Students

    async def get_students(self, course_id: int, skip: Optional[int] = None, take: Optional[int] = None,
                           search: Optional[str] = None) -> List[Student]:
        return await self._request(
            "GET", f"courses/{course_id}/students", f"Course {course_id} not found",
            parse=lambda r: [Student.model_validate(s) for s in r.json()],
            params=self._page_params(skip, take, search),
        )

    async def get_student(self, course_id: int, student_id: int) -> Student:
        return await self._request(
            "GET", f"courses/{course_id}/students/{student_id}",
            f"Course {course_id} or Student {student_id} not found",
            parse=lambda r: Student.model_validate(r.json()),
        )

    async def add_student(self, course_id: int, request: AddStudentRequest) -> AddStudentResponse:
        return await self._request(
            "POST", f"courses/{course_id}/students", f"Course {course_id} not found",
            parse=lambda r: AddStudentResponse(
                student=Student.model_validate(r.json()),
                resource_uri=r.headers["location"],
            ),
            json=request.model_dump(by_alias=True),
        )

    async def update_student(self, course_id: int, student_id: int, request: UpdateStudentRequest) -> None:
        await self._request(
            "PUT", f"courses/{course_id}/students/{student_id}",
            f"Course {course_id} or Student {student_id} not found",
            json=request.model_dump(by_alias=True),
        )

    async def delete_student(self, course_id: int, student_id: int) -> None:
        await self._request(
            "DELETE", f"courses/{course_id}/students/{student_id}",
            f"Course {course_id} or Student {student_id} not found",
        )

    # Identification images

    async def get_student_identification_image(self, course_id: int, student_id: int) -> IdentificationImage:
        return await self._request(
            "GET", f"courses/{course_id}/students/{student_id}/identificationimage",
            f"Course {course_id}, Student {student_id} or their image not found",
            parse=lambda r: IdentificationImage(content=r.content, file_name=_file_name_from(r)),
        )

    async def set_student_identification_image(self, course_id: int, student_id: int,
                                               image: Optional[bytes], file_name: Optional[str]) -> None:
        kwargs = {}
        if image is not None and file_name is not None:
            kwargs["files"] = {"file": (file_name, image)}
        await self._request(
            "PUT", f"courses/{course_id}/students/{student_id}/identificationimage",
            f"Course {course_id} or Student {student_id} not found",
            **kwargs,
        )

    async def delete_student_identification_image(self, course_id: int, student_id: int) -> None:
        await self._request(
            "DELETE", f"courses/{course_id}/students/{student_id}/identificationimage",
            f"Course {course_id} or Student {student_id} not found",
        )
