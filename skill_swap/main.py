# skill_swap/main.py - Application entry point
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from skill_swap import __version__
from skill_swap.api import auth, credits, gamification, notifications, reviews, swap_requests, users
from skill_swap.config import settings
from skill_swap.database import Base, SessionLocal, engine
from skill_swap.services.achievement_service import seed_default_achievements
from skill_swap.services.errors import SkillSwapError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Local/dev schema; production schemas are managed by Alembic
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_default_achievements(db)
    finally:
        db.close()
    logger.info("Skill Swap API started (env=%s)", settings.APP_ENV)
    yield


# Initialize FastAPI app
app = FastAPI(title="Skill Swap API", version=__version__, lifespan=lifespan)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SkillSwapError)
async def skill_swap_error_handler(request: Request, exc: SkillSwapError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid value")
    return JSONResponse(
        status_code=400,
        content={"error": f"{field}: {message}" if field else message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# API routers
app.include_router(auth.router)            # /auth/*
app.include_router(users.router)           # /users/*
app.include_router(swap_requests.router)   # /swap-requests/*
app.include_router(reviews.router)         # /reviews/*
app.include_router(credits.router)         # /credits/*
app.include_router(gamification.router)    # /gamification/*
app.include_router(notifications.router)   # /notifications/*


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "Skill Swap API is running",
        "version": __version__,
    }
