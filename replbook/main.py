"""
FastAPI main application for replbook.

This application exposes the notebook conversion and cell execution services
over HTTP for editor hosts that do not embed Python.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from .api import cells, notebooks
from ._version import __version__

logger = logging.getLogger(__name__)

app = FastAPI(
    title="replbook API",
    description="API for viewing REPL source files as notebooks and executing their cells",
    version=__version__
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.debug(f"🌐 {request.method} {request.url.path} -> {response.status_code}")
    return response


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Report an unexpected error as its type and message; the trace goes to the log."""
    logger.error(f"🚨 {request.method} {request.url.path} failed", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": f"{type(exc).__name__}: {exc}", "error_type": type(exc).__name__}
    )


# Include API routers
app.include_router(notebooks.router, prefix="/api/notebooks", tags=["notebooks"])
app.include_router(cells.router, prefix="/api/cells", tags=["cells"])


@app.get("/")
async def root():
    """Health check endpoint with version info."""
    return {"message": "replbook API", "status": "running", "version": __version__}


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
