# skillsync/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from skillsync.api import admin, auth, booking, category, review, student, tutor
from skillsync.config import settings
from skillsync.database import Base, check_database_connection, engine
from skillsync.exceptions import DomainError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Verify the database and create tables before serving."""
    logger.info("Starting SkillSync API (env=%s)", settings.APP_ENV)
    # Raises when the database is unreachable, which aborts startup
    check_database_connection()
    Base.metadata.create_all(bind=engine)
    yield
    logger.info("SkillSync API stopped")


# Initialize FastAPI app
app = FastAPI(
    title="SkillSync API",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===== ERROR HANDLERS =====

def _error_body(message: str, code: str, **extra) -> dict:
    body = {"success": False, "message": message, "code": code}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(_error_body(exc.message, exc.code, details=exc.details or None)),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Rejected input is left out: it may hold values JSON cannot encode (NaN, Infinity)
    errors = [{"loc": err["loc"], "msg": err["msg"], "type": err["type"]} for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(_error_body("Request validation failed", "ValidationError", errors=errors)),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), "HTTPError"),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Something went wrong!", "InternalError"),
    )


# API routers
app.include_router(auth.router, prefix="/api")          # /api/auth/*
app.include_router(booking.router, prefix="/api")       # /api/bookings/*
app.include_router(review.router, prefix="/api")        # /api/reviews/*
app.include_router(tutor.router, prefix="/api")         # /api/tutors/*
app.include_router(tutor.self_router, prefix="/api")    # /api/tutor/*
app.include_router(category.router, prefix="/api")      # /api/categories/*
app.include_router(student.router, prefix="/api")       # /api/students/*
app.include_router(admin.router, prefix="/api")         # /api/admin/*


@app.get("/health")
def health_check():
    return {
        "success": True,
        "status": "healthy",
        "message": "SkillSync API is running",
        "version": "1.0.0",
    }
