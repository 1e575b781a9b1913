import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from taskboard.config import CORS_ORIGINS, LOG_LEVEL, parse_cors_origins
from taskboard.database import Base, engine
from taskboard.errors import (
    FieldValidationError,
    field_validation_handler,
    generic_exception_handler,
    request_validation_handler,
)
from taskboard.logging_setup import setup_logging
from taskboard.models import task, user  # noqa: F401  register tables
from taskboard.routers import auth, tasks

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Taskboard")

app.add_middleware(
    CORSMiddleware,
    allow_origins=parse_cors_origins(CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(auth.router)
app.include_router(tasks.router)

app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(FieldValidationError, field_validation_handler)
# Uncaught errors become a generic JSON 500; HTTPException keeps FastAPI's own handler
app.add_exception_handler(Exception, generic_exception_handler)

logger.info("Taskboard API ready")
