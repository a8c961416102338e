import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from reader_assistant.config import settings

# --- Logging Configuration ---
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

log_handlers: list[logging.Handler] = [logging.StreamHandler()] # Log to console
if settings.log_file:
    log_handlers.append(logging.FileHandler(settings.log_file)) # Also log to a file

# Configure root logger
logging.basicConfig(
    level=settings.log_level.upper(),
    format=LOG_FORMAT,
    handlers=log_handlers
)

# httpx logs full request URLs at INFO, and the Gemini key travels in the query string
for noisy_logger in ("httpx", "httpcore"):
    logging.getLogger(noisy_logger).setLevel(logging.WARNING)

# Get a logger instance for this module
logger = logging.getLogger(__name__)

# Import API routers AFTER logging is configured
from reader_assistant.api.endpoints import health, models, query, transcribe
from reader_assistant.exceptions import ReaderAssistantError

# --- Initialize FastAPI App ---
app = FastAPI(
    title="Reader Assistant Gateway",
    description="Answers questions about images with a selectable vision provider, optionally enriched by web search.",
    version="0.1.0",
)

# --- CORS ---
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    """Answers every preflight with 204 and stamps CORS headers on all responses."""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response

# --- Error Envelopes ---
@app.exception_handler(ReaderAssistantError)
async def reader_assistant_error_handler(request: Request, exc: ReaderAssistantError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
        for err in exc.errors()
    )
    logger.info(f"{request.method} {request.url.path} rejected (400): {details}")
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {details}"})

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and wrong methods both read as a plain 404
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not Found", status_code=404)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

# --- API Routers ---
app.include_router(query.router, prefix="/api/query")
app.include_router(transcribe.router, prefix="/api/transcribe")
app.include_router(health.router, prefix="/api/health")
app.include_router(models.router, prefix="/api/models")

# --- Startup / Shutdown Events ---
@app.on_event("startup")
async def startup_event():
    logger.info("-"*20 + " Application Startup " + "-"*20)
    for name in ("claude_api_key", "openai_api_key", "gemini_api_key"):
        if not getattr(settings, name):
            logger.warning(f"{name.upper()} is not configured; that provider will be unavailable.")
    if not settings.brave_search_api_key:
        logger.warning("BRAVE_SEARCH_API_KEY is not configured; web search is disabled.")
    logger.info("Application startup complete.")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("-"*20 + " Application Shutdown " + "-"*20)
    logger.info("Application shutdown complete.")


# --- Run with Uvicorn (for local development) ---
if __name__ == "__main__":
    logger.info("Starting Uvicorn server for development...")
    uvicorn.run(
        "reader_assistant.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info" # Uvicorn's log level (controls Uvicorn's own messages)
        # Note: Python's logging level is set separately above
    )
