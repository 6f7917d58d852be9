"""Main entry point for the StrideMatch context API."""

from dotenv import load_dotenv
load_dotenv()  # Load .env into environment variables

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stridematch.api.middleware import RequestLoggingMiddleware
from stridematch.api.routes.context import router as context_router
from stridematch.catalog import CatalogError
from stridematch.config.settings import settings
from stridematch.logging import configure_logging, log_error
from stridematch.matching.normalizer import VocabularyError

configure_logging()

logger = structlog.get_logger()

app = FastAPI(title="StrideMatch Context API")

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(context_router)


@app.exception_handler(CatalogError)
@app.exception_handler(VocabularyError)
async def data_file_error_handler(request: Request, exc: Exception):
    """Report an unusable catalog or vocabulary file as a service error."""
    log_error(type(exc).__name__, str(exc), {"path": request.url.path})
    return JSONResponse(status_code=503, content={"error": "Shoe data is unavailable"})


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


def run():
    """Run the API server."""
    logger.info(
        "Starting StrideMatch API",
        host=settings.api_host,
        port=settings.api_port,
        environment=settings.environment,
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
