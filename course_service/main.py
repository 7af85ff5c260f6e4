from typing import Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import courses, students
from .auth import BasicAuthenticator
from .config import Settings
from .data_service import CourseDataService
from .middleware import BasicAuthMiddleware, LoggingMiddleware, logger
from .service import CourseService
from .validation import RequestValidationFailed

PROBLEM_JSON = "application/problem+json"
UNPROCESSABLE_ENTITY = 422


def _pascal_case(name: str) -> str:
    if "_" in name:
        return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)
    return name[:1].upper() + name[1:]


def _field_name(loc) -> str:
    names = [part for part in loc[1:] if isinstance(part, str)]
    return _pascal_case(names[-1] if names else str(loc[0]))


def validation_problem(request: Request, errors: Dict[str, List[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=UNPROCESSABLE_ENTITY,
        media_type=PROBLEM_JSON,
        content={
            "type": "https://tools.ietf.org/html/rfc4918#section-11.2",
            "title": "One or more validation errors occurred",
            "status": UNPROCESSABLE_ENTITY,
            "detail": "See the errors field for details.",
            "instance": str(request.url.path),
            "errors": errors,
        },
    )


async def request_validation_failed_handler(request: Request, exc: RequestValidationFailed):
    logger.info(f"Validation failed: {request.method} {request.url.path} | {exc}")
    return validation_problem(request, exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Framework parse errors (bad JSON, wrong types, bad query) in the same shape"""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(error.get("loc", ("body",))), []).append(error.get("msg", "Invalid value"))
    logger.info(f"Invalid input: {request.method} {request.url.path} | {errors}")
    return validation_problem(request, errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Enhanced HTTP exception handler"""
    logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "Error",
            "message": exc.detail,
            "status_code": exc.status_code,
            "path": str(request.url.path)
        },
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unexpected errors"""
    logger.exception(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "status_code": 500,
            "path": str(request.url.path)
        }
    )


def create_app(data_service: Optional[CourseDataService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Create the Courses and Students API.

    The store is injected so that callers (and tests) control its lifetime;
    a freshly seeded one is created when none is given.

    Middleware runs outermost first: CORS, request logging, then Basic
    authentication, all before route matching. Body validation follows
    routing and always runs before a handler touches the store.
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Courses and Students API",
        description="Manage Courses and the Students enrolled in them",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.course_service = CourseService(data_service or CourseDataService())

    # Starlette runs the last added middleware first
    app.add_middleware(
        BasicAuthMiddleware,
        authenticator=BasicAuthenticator(settings.api_username, settings.api_password),
    )
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationFailed, request_validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(courses.router)
    app.include_router(students.router)

    return app


def run():
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
