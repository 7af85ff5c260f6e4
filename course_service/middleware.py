import logging
import os
import time

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .auth import BasicAuthenticator, parse_basic_authorization

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("course_service")

PUBLIC_PATHS = frozenset({"/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all incoming requests and responses"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        # Body is not read here so the stream stays available to the route
        logger.info(
            f"Request: {request.method} {request.url.path} | "
            f"Client: {request.client.host if request.client else 'unknown'} | "
            f"Query params: {dict(request.query_params)}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Exception: {request.method} {request.url.path} | "
                f"Error: {str(e)} | "
                f"Process time: {process_time:.3f}s"
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} | "
            f"Status: {response.status_code} | "
            f"Process time: {process_time:.3f}s"
        )

        return response


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """Rejects requests without valid Basic credentials before routing runs"""

    def __init__(self, app, authenticator: BasicAuthenticator, public_paths=PUBLIC_PATHS):
        super().__init__(app)
        self.authenticator = authenticator
        self.public_paths = frozenset(public_paths)

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.public_paths:
            return await call_next(request)

        header = request.headers.get("Authorization")
        user = self.authenticator.authenticate_header(header)
        if user is None:
            credentials = parse_basic_authorization(header)
            if credentials is None:
                logger.warning(f"Missing or malformed Authorization header: {request.method} {request.url.path}")
            else:
                logger.warning(f"Failed authentication for username: {credentials[0]}")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={
                    "error": "Unauthorized",
                    "message": "Invalid or missing credentials",
                    "status_code": status.HTTP_401_UNAUTHORIZED,
                    "path": str(request.url.path)
                },
                headers={"WWW-Authenticate": "Basic"},
            )

        request.state.user = user
        return await call_next(request)
