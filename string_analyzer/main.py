from fastapi import FastAPI, Request, status, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from typing import Optional
import logging

from string_analyzer import __version__, config
from string_analyzer.api.routes import router
from string_analyzer.crud import InMemoryStringStore, SQLStringStore, StringStore

logger = logging.getLogger(__name__)


def build_store() -> StringStore:
    """Pick the storage backend from configuration."""
    if config.STORAGE_BACKEND == "memory":
        logger.info("Using in-memory storage backend")
        return InMemoryStringStore()
    if config.STORAGE_BACKEND != "sql":
        raise ValueError(f"Unknown STORAGE_BACKEND '{config.STORAGE_BACKEND}' (expected 'sql' or 'memory')")
    return SQLStringStore.from_url(config.get_database_url())


def create_app(store: Optional[StringStore] = None) -> FastAPI:
    app = FastAPI(
        title="String Analyzer Service",
        description="Analyze and store string properties",
        version=__version__,
    )
    app.state.store = store if store is not None else build_store()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Initialize storage on startup
    @app.on_event("startup")
    def on_startup():
        logger.info("Initializing storage...")
        app.state.store.init()
        logger.info("Storage initialized successfully")

    app.include_router(router, tags=["strings"])

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": "String Analyzer Service",
            "version": __version__,
            "endpoints": {
                "POST /strings": "Analyze and store a string",
                "GET /strings/{string_value}": "Get specific string analysis",
                "GET /strings": "Get all strings with optional filters",
                "GET /strings/filter-by-natural-language": "Filter using natural language",
                "DELETE /strings/{string_value}": "Delete a string",
            },
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy"}

    # Validation error handler
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = {}
        for error in exc.errors():
            field = error["loc"][-1] if error["loc"] else "body"
            errors[str(field)] = error["msg"]

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request",
                "details": errors,
            },
        )

    # HTTPException handler
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # If detail is already a dict with 'error' key, return as is
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            return JSONResponse(status_code=exc.status_code, content=exc.detail)
        # Otherwise wrap it
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    # Generic error handler
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc!r}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    return app


config.configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("string_analyzer.main:app", host=config.HOST, port=config.PORT)
