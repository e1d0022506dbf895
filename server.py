"""
Spooky Study Buddy Server

FastAPI server with:
- Story generation from pasted text or uploaded files
- Quiz generation, scoring and feedback
- XP, levels, streaks, badges and leaderboard
- Themed error payloads
- Background cleanup of expired stories
"""

import random
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app_state import Services, build_services, get_services
from core.config import StudyBuddyConfig
from core.exceptions import SpookyError
from core.logger import configure_logging, get_logger
from routers import progress_router, quizzes_router, stories_router
from spooky.models.api import ErrorCharacter, ErrorResponse, HealthResponse
from spooky.prompts import ERROR_CHARACTERS

logger = get_logger("server")

VERSION = "1.0.0"

# =============================================================================
# ERROR PAYLOAD
# =============================================================================

FILE_TOO_LARGE = (
    "Whoa! That file is bigger than a haunted mansion!",
    "Try uploading a smaller file or break your content into smaller pieces.",
)
INVALID_FILE_TYPE = (
    "Hmm, that file type gives me the creeps!",
    "Please upload a .txt, .md or .pdf file, or paste your text directly.",
)
ROUTE_NOT_FOUND = (
    "This page has vanished into thin air!",
    "Check the URL or navigate back to the main page.",
)
SERVER_ERROR = (
    "Our cauldron seems to be bubbling over!",
    "Please try again in a moment. If the problem continues, our ghost developers are on it!",
)


def spooky_error_payload(
    status_code: int,
    message: str,
    suggested_action: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> dict:
    """Build the themed error body for any failed request.

    Upload failures get dedicated wording and server errors never expose
    their internal message.
    """
    character = (rng or random).choice(ERROR_CHARACTERS)

    if "File too large" in message:
        message = FILE_TOO_LARGE[0]
        suggested_action = suggested_action or FILE_TOO_LARGE[1]
    elif "Invalid file type" in message:
        message, suggested_action = INVALID_FILE_TYPE
    elif status_code >= 500:
        message = SERVER_ERROR[0]
        suggested_action = suggested_action or SERVER_ERROR[1]

    payload = ErrorResponse(
        message=message or "Something spooky happened!",
        character=ErrorCharacter(
            name=character.name,
            personality=character.personality,
            catchphrase=character.catchphrase,
        ),
        suggested_action=suggested_action,
        error_code=f"SPOOKY_{status_code}",
        timestamp=datetime.now(timezone.utc),
    )
    return payload.model_dump(mode="json", by_alias=True)


async def spooky_error_handler(request: Request, exc: SpookyError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        path=request.url.path,
        status=exc.status_code,
        error=exc.message,
        details=exc.details,
        exc_info=exc if exc.status_code >= 500 else None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=spooky_error_payload(exc.status_code, exc.message, exc.suggested_action),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    fields = [".".join(str(part) for part in err.get("loc", ())[1:]) for err in errors]
    logger.warning("Invalid request", path=request.url.path, fields=fields)
    return JSONResponse(
        status_code=400,
        content=spooky_error_payload(
            400,
            "Invalid request data",
            f"Please check these fields and try again: {', '.join(f for f in fields if f) or 'body'}",
        ),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        message, suggested_action = ROUTE_NOT_FOUND
    else:
        message, suggested_action = str(exc.detail), None
    logger.warning("HTTP error", path=request.url.path, status=exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=spooky_error_payload(exc.status_code, message, suggested_action),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=exc)
    return JSONResponse(status_code=500, content=spooky_error_payload(500, str(exc)))


# =============================================================================
# FASTAPI APP
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start and stop the expired-story cleanup task."""
    services: Services = app.state.services
    logger.info(
        "Starting Spooky Study Buddy",
        environment=services.config.environment,
        ai_enabled=services.config.ai_enabled,
        data_dir=str(services.config.data_dir),
    )
    services.cleanup.start()
    yield
    await services.cleanup.stop()
    logger.info("Spooky Study Buddy stopped")


def create_app(config: Optional[StudyBuddyConfig] = None, services: Optional[Services] = None) -> FastAPI:
    """Application factory.

    Args:
        config: Settings (default: loaded from the environment and .env)
        services: Prebuilt services, mainly for tests

    Returns:
        Configured FastAPI app
    """
    if config is None:
        load_dotenv()
        config = services.config if services else StudyBuddyConfig.from_env()
    configure_logging(config.log_level, config.environment)

    app = FastAPI(
        title="Spooky Study Buddy",
        description="Halloween-themed study stories, quizzes and progress tracking",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.services = services or build_services(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SpookyError, spooky_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(stories_router)
    app.include_router(quizzes_router)
    app.include_router(progress_router)

    app.add_api_route("/", root, methods=["GET"])
    app.add_api_route("/health", health_check, methods=["GET"], response_model=HealthResponse)
    return app


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


async def root(request: Request):
    """Service banner."""
    return {
        "status": "ok",
        "message": "🎃 Spooky Study Buddy is haunting this server!",
        "version": VERSION,
    }


async def health_check(request: Request):
    """Detailed health check."""
    services = get_services(request)
    return HealthResponse(
        message="🎃 Spooky Study Buddy API is running!",
        timestamp=datetime.now(timezone.utc),
        ai_enabled=services.config.ai_enabled,
        details={
            "environment": services.config.environment,
            "cleanupRunning": services.cleanup.running,
            "storyTtlDays": services.config.story_ttl_days,
        },
    )


app = create_app()


# =============================================================================
# MAIN
# =============================================================================


def main() -> None:
    import uvicorn

    config = app.state.services.config
    uvicorn.run(app, host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
