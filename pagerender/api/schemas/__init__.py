"""
API Schemas
"""
from .conversion_schemas import (
    BatchConversionResponseSchema,
    FailedFileSchema,
    FileConversionSchema,
    HealthSchema,
    ImagePageSchema,
    outcome_to_schema,
    page_to_schema,
)

__all__ = [
    "BatchConversionResponseSchema",
    "FailedFileSchema",
    "FileConversionSchema",
    "HealthSchema",
    "ImagePageSchema",
    "outcome_to_schema",
    "page_to_schema",
]
