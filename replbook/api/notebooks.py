"""
API endpoints for notebook conversion.

This module provides REST endpoints that turn source files into notebook
cells and back.
"""

import logging
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import Response

from ..models.wire import NotebookData
from ..services.shared import notebook_serializer

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/deserialize", response_model=NotebookData, response_model_exclude_none=True)
async def deserialize_notebook(request: Request):
    """
    Convert a source file into notebook cells.

    The request body is the raw UTF-8 file content.
    """
    data = await request.body()
    try:
        return notebook_serializer.deserialize_notebook(data)
    except ValueError as e:
        logger.error(f"Failed to deserialize notebook: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to deserialize notebook: {str(e)}"
        )


@router.post("/serialize")
async def serialize_notebook(notebook: NotebookData):
    """Convert notebook cells back into source file content."""
    data = notebook_serializer.serialize_notebook(notebook)
    return Response(content=data, media_type="text/plain; charset=utf-8")
