import os

from dotenv import load_dotenv

load_dotenv()

SECRET_KEY = os.environ.get("SECRET_KEY", "CHANGE_ME_DEV_SECRET_KEY")
ALGORITHM = os.environ.get("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = float(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./taskboard.db")

TASKS_PER_PAGE = int(os.environ.get("TASKS_PER_PAGE", 10))
MAX_TASKS_PER_PAGE = int(os.environ.get("MAX_TASKS_PER_PAGE", 100))

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def parse_cors_origins(value: str):
    if not value:
        return []
    if value.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in value.split(",") if origin.strip()]
