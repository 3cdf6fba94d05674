"""Conversion endpoints for v1 API."""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from pagerender.api.schemas import (
    BatchConversionResponseSchema,
    FailedFileSchema,
    outcome_to_schema,
)
from pagerender.api.v1.dependencies import get_convert_batch_handler, get_processing_mode
from pagerender.application.commands.convert_batch import (
    ConvertBatchCommand,
    ConvertBatchHandler,
    UploadedFile,
    failed_outcomes,
)
from pagerender.domain.value_objects.processing_mode import ProcessingMode
from pagerender.infrastructure.packaging import archive_file_name, build_zip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/convert", tags=["convert"])


async def _read_uploads(files: Optional[List[UploadFile]]) -> List[UploadedFile]:
    uploads = [upload for upload in files or [] if upload is not None]
    if not uploads:
        raise HTTPException(status_code=400, detail="No files uploaded.")

    result: List[UploadedFile] = []
    for upload in uploads:
        data = await upload.read()
        result.append(UploadedFile(filename=upload.filename or "", content=data))
    return result


@router.post("", response_model=BatchConversionResponseSchema)
async def convert_files(
    files: Optional[List[UploadFile]] = File(default=None),
    mode: ProcessingMode = Depends(get_processing_mode),
    handler: ConvertBatchHandler = Depends(get_convert_batch_handler),
) -> BatchConversionResponseSchema:
    uploads = await _read_uploads(files)
    outcomes = await run_in_threadpool(handler.handle, ConvertBatchCommand(files=tuple(uploads), mode=mode))
    return BatchConversionResponseSchema(files=[outcome_to_schema(outcome) for outcome in outcomes])


@router.post("/zip", response_class=Response)
async def convert_files_to_zip(
    files: Optional[List[UploadFile]] = File(default=None),
    mode: ProcessingMode = Depends(get_processing_mode),
    handler: ConvertBatchHandler = Depends(get_convert_batch_handler),
) -> Response:
    uploads = await _read_uploads(files)
    outcomes = await run_in_threadpool(handler.handle, ConvertBatchCommand(files=tuple(uploads), mode=mode))

    failures = failed_outcomes(outcomes)
    if failures:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "One or more files could not be converted.",
                "files": [
                    FailedFileSchema(fileName=outcome.filename, error=outcome.error or "").model_dump()
                    for outcome in failures
                ],
            },
        )

    archive = await run_in_threadpool(build_zip, [outcome.document for outcome in outcomes])
    name = archive_file_name()
    logger.info("Serving archive %s", name, extra={"files": len(outcomes), "archive_bytes": len(archive)})
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{name}"'},
    )
