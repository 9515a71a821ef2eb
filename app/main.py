import logging

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.deps import get_current_admin
from app.core.config import settings
from app.core.errors import PortalError
from app.api.v1 import (
    auth_router,
    students_router,
    classes_router,
    exams_router,
    marks_router,
    portal_router,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME, openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

admin_only = [Depends(get_current_admin)]

# Include Routers
app.include_router(auth_router, prefix=f"{settings.API_V1_STR}/auth", tags=["Auth"])
app.include_router(
    portal_router, prefix=f"{settings.API_V1_STR}/portal", tags=["Portal"]
)
app.include_router(
    students_router,
    prefix=f"{settings.API_V1_STR}/students",
    tags=["Students"],
    dependencies=admin_only,
)
app.include_router(
    classes_router,
    prefix=f"{settings.API_V1_STR}/classes",
    tags=["Classes"],
    dependencies=admin_only,
)
app.include_router(
    exams_router,
    prefix=f"{settings.API_V1_STR}/exams",
    tags=["Exams"],
    dependencies=admin_only,
)
app.include_router(
    marks_router,
    prefix=f"{settings.API_V1_STR}/marks",
    tags=["Marks"],
    dependencies=admin_only,
)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Validation error on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.get("/")
async def root():
    return {"message": "Welcome to the Marks Portal API"}
