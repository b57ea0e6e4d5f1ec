import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from hostel_attendance.api.v1.api import api_router
from hostel_attendance.core.config import settings
from hostel_attendance.core.exceptions import (
    AttendanceError,
    InvalidCalendarPeriod,
    InvalidLeavePeriod,
    InvalidSessionType,
    InvalidStatus,
    StoreUnavailable,
    UnknownSession,
    UnknownStudent,
)
from hostel_attendance.core.logging import configure_logging

logger = logging.getLogger(__name__)

# Most specific first; InvalidLateMinutes is caught through InvalidStatus
ERROR_STATUS_CODES = (
    (InvalidSessionType, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidStatus, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidCalendarPeriod, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidLeavePeriod, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (UnknownSession, status.HTTP_404_NOT_FOUND),
    (UnknownStudent, status.HTTP_404_NOT_FOUND),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_code_for(exc: AttendanceError) -> int:
    for error_cls, code in ERROR_STATUS_CODES:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def attendance_error_handler(request: Request, exc: AttendanceError) -> JSONResponse:
    code = status_code_for(exc)
    if code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("%s starting", settings.PROJECT_NAME)
    yield


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
app.add_exception_handler(AttendanceError, attendance_error_handler)
app.include_router(api_router, prefix=settings.API_V1_STR)
