"""Shared FastAPI dependencies for v1 API routers.

These factories centralize construction of the conversion handlers so
routers depend on simple callables that tests can override.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, Query

from pagerender.application.commands.convert_batch import ConvertBatchHandler
from pagerender.application.factory import create_convert_batch_handler
from pagerender.config import Settings, get_settings
from pagerender.domain.exceptions import UnsupportedModeError
from pagerender.domain.value_objects.processing_mode import ProcessingMode


def get_app_settings() -> Settings:
    """Provide the cached application settings."""
    return get_settings()


@lru_cache()
def _convert_batch_handler() -> ConvertBatchHandler:
    return create_convert_batch_handler(get_settings())


def get_convert_batch_handler() -> ConvertBatchHandler:
    """Provide a cached ConvertBatch handler."""
    return _convert_batch_handler()


def get_processing_mode(
    mode: Optional[str] = Query(default=None, description="lossless or auto"),
    settings: Settings = Depends(get_app_settings),
) -> ProcessingMode:
    """Resolve the ``mode`` query parameter, falling back to the configured default."""
    try:
        default = ProcessingMode.parse(settings.default_processing_mode)
        return ProcessingMode.parse(mode, default=default)
    except UnsupportedModeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

