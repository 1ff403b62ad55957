# course_enrollment/core/config.py
import os
from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

def _default_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url and url.strip():
        return url
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return f"sqlite:///{os.path.join(data_dir, 'enrollment.db')}"

def _default_session_file() -> str:
    return os.path.expanduser(os.getenv("SESSION_FILE", "~/.course_enrollment/session.json"))

class Settings(BaseModel):
    # client
    API_BASE_URL: str = Field(default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000/api"))
    SESSION_FILE: str = Field(default_factory=_default_session_file)

    # backend
    DATABASE_URL: str = Field(default_factory=_default_database_url)
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120")))
    MAX_ACTIVE_ENROLLMENTS: int = Field(default_factory=lambda: int(os.getenv("MAX_ACTIVE_ENROLLMENTS", "3")))
    ADMIN_NAME: str = Field(default_factory=lambda: os.getenv("ADMIN_NAME", "Administrator"))
    ADMIN_EMAIL: str = Field(default_factory=lambda: os.getenv("ADMIN_EMAIL", "admin@university.edu"))
    ADMIN_PASSWORD: str = Field(default_factory=lambda: os.getenv("ADMIN_PASSWORD", "admin12345"))

    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

settings = Settings()
