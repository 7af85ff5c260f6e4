import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

MAX_IMAGE_SIZE = 16 * 1024 * 1024


class Settings(BaseModel):
    api_username: str = "caller@zirpl.com"
    api_password: str = "Pass123!"
    max_image_size: int = MAX_IMAGE_SIZE
    default_course_take: int = 25
    default_student_take: int = 5
    cors_origins: List[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = 8002
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and a .env file, if any)"""
        defaults = cls()
        return cls(
            api_username=os.getenv("API_USERNAME", defaults.api_username),
            api_password=os.getenv("API_PASSWORD", defaults.api_password),
            max_image_size=int(os.getenv("MAX_IMAGE_SIZE", defaults.max_image_size)),
            default_course_take=int(os.getenv("DEFAULT_COURSE_TAKE", defaults.default_course_take)),
            default_student_take=int(os.getenv("DEFAULT_STUDENT_TAKE", defaults.default_student_take)),
            cors_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
            host=os.getenv("HOST", defaults.host),
            port=int(os.getenv("PORT", defaults.port)),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )
