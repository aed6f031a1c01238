"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.logging import log_rejected_request
from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import calendar_router, events_router, health_router, tasks_router
from core.config import API_DEBUG, API_VERSION, DB_PATH
from core.database import create_schema, get_connection


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: make sure the database and its tables exist
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection()
    try:
        create_schema(conn)
    finally:
        conn.close()

    yield


app = FastAPI(
    title="CRM Calendar API",
    description="REST API for CRM calendar events, recurring series, task scheduling and calendar layouts",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies and params in the standard error format."""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.append(f"{location}: {error.get('msg')}")
    error = ErrorResponse(
        error="Request validation failed",
        code=ErrorCodes.VALIDATION_ERROR,
        details=details,
    )
    log_rejected_request(request, 422, error.code, error.error, details)
    return JSONResponse(status_code=422, content=error.model_dump())


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(events_router)
app.include_router(calendar_router)
app.include_router(tasks_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
