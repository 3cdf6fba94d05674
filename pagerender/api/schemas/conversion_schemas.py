"""
Schemas for the conversion endpoints
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from pagerender.application.commands.convert_batch import FileConversionOutcome
from pagerender.domain.entities.processed_page import ProcessedPage
from pagerender.infrastructure.packaging import bytes_to_data_url


class ImagePageSchema(BaseModel):
    pageNumber: int
    mimeType: str
    fileExtension: str
    suggestedFileName: str
    dataUrl: str
    width: int
    height: int
    sizeBytes: int


class FileConversionSchema(BaseModel):
    originalFileName: str
    pages: List[ImagePageSchema] = Field(default_factory=list)
    error: Optional[str] = None
    errorType: Optional[str] = None


class BatchConversionResponseSchema(BaseModel):
    files: List[FileConversionSchema] = Field(default_factory=list)


class FailedFileSchema(BaseModel):
    fileName: str
    error: str


class HealthSchema(BaseModel):
    status: str = "ok"


def page_to_schema(page: ProcessedPage) -> ImagePageSchema:
    return ImagePageSchema(
        pageNumber=page.page_number,
        mimeType=page.mime_type,
        fileExtension=page.file_extension,
        suggestedFileName=page.suggested_file_name,
        dataUrl=bytes_to_data_url(page.data, page.mime_type),
        width=page.width,
        height=page.height,
        sizeBytes=page.size_bytes,
    )


def outcome_to_schema(outcome: FileConversionOutcome) -> FileConversionSchema:
    if outcome.document is None:
        return FileConversionSchema(
            originalFileName=outcome.filename,
            error=outcome.error,
            errorType=outcome.error_type,
        )
    return FileConversionSchema(
        originalFileName=outcome.document.original_file_name,
        pages=[page_to_schema(page) for page in outcome.document.pages],
    )
