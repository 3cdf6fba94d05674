"""ConvertDocument command - converts one uploaded file into encoded pages.

Acts as the page orchestrator: decodes the source, tries the lossless
passthrough, otherwise normalizes and encodes every frame, and assembles
the pages in source order. Decoding, normalization and encoding are
injected collaborators.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from pagerender.domain.entities.decoded_frame import DecodedFrame
from pagerender.domain.entities.processed_page import ProcessedDocument, ProcessedPage
from pagerender.domain.entities.source_document import SourceDocument
from pagerender.domain.exceptions import ConversionCancelledError, ConversionError
from pagerender.domain.services.candidate_encoder import CandidateEncoder, ImageCodec
from pagerender.domain.services.format_policy import target_format
from pagerender.domain.services.passthrough_selector import LosslessPassthroughSelector
from pagerender.domain.value_objects.image_format import ImageFormat
from pagerender.domain.value_objects.processing_mode import ProcessingMode

logger = logging.getLogger(__name__)


class FrameDecoder(Protocol):
    def decode(self, source: SourceDocument) -> List[DecodedFrame]: ...


class FrameNormalizer(Protocol):
    def normalize(self, frame: DecodedFrame) -> DecodedFrame: ...


@dataclass(frozen=True)
class ConvertDocumentCommand:
    filename: str
    content: bytes = field(repr=False)
    mode: ProcessingMode = ProcessingMode.LOSSLESS


@dataclass(frozen=True)
class _PageJob:
    source: SourceDocument
    mode: ProcessingMode
    target: ImageFormat
    cancel_event: Optional[threading.Event]


class ConvertDocumentHandler:
    """Handles ConvertDocument commands."""

    def __init__(
        self,
        decoder: FrameDecoder,
        normalizer: FrameNormalizer,
        codec: ImageCodec,
        *,
        page_workers: int = 1,
    ):
        self._decoder = decoder
        self._normalizer = normalizer
        self._passthrough = LosslessPassthroughSelector(codec)
        self._encoder = CandidateEncoder(codec)
        self._page_workers = max(1, int(page_workers))

    def handle(self, command: ConvertDocumentCommand, cancel_event: Optional[threading.Event] = None) -> ProcessedDocument:
        mode = ProcessingMode.parse(command.mode)
        source = SourceDocument(filename=command.filename, content=command.content)
        target = target_format(source.extension, source.is_pdf)

        try:
            frames = self._decoder.decode(source)
            _raise_if_cancelled(cancel_event, source, completed=0)
            pages = self._convert_frames(frames, _PageJob(source, mode, target, cancel_event))
        except ConversionError as exc:
            if exc.filename is None:
                exc.filename = source.filename
            raise

        document = ProcessedDocument.from_pages(source.filename, pages)
        logger.info(
            "Converted %s",
            source.filename,
            extra={
                "file_name": source.filename,
                "mode": mode.value,
                "target_format": target.value,
                "pages": document.page_count,
                "input_bytes": source.size,
                "output_bytes": document.total_bytes,
            },
        )
        return document

    # ------------------------------------------------------------------
    # Page orchestration
    # ------------------------------------------------------------------
    def _convert_frames(self, frames: Sequence[DecodedFrame], job: _PageJob) -> List[ProcessedPage]:
        passthrough = self._passthrough.select(job.source, frames, job.mode)
        if passthrough is not None:
            return [ProcessedPage.from_candidate(passthrough, 1, job.source.base_name)]

        if self._page_workers == 1 or len(frames) == 1:
            pages = []
            for position, frame in enumerate(frames):
                _raise_if_cancelled(job.cancel_event, job.source, completed=position)
                pages.append(self._convert_page(frame, position + 1, job))
            return pages

        return self._convert_concurrently(frames, job)

    def _convert_concurrently(self, frames: Sequence[DecodedFrame], job: _PageJob) -> List[ProcessedPage]:
        workers = min(self._page_workers, len(frames))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="page") as pool:
            futures: List[Future[ProcessedPage]] = [
                pool.submit(self._convert_page_checked, frame, position + 1, job)
                for position, frame in enumerate(frames)
            ]
            pages: List[ProcessedPage] = []
            try:
                # Futures are collected in submission order, i.e. source order.
                for future in futures:
                    pages.append(future.result())
            except BaseException:
                for future in futures:
                    future.cancel()
                raise
        return pages

    def _convert_page_checked(self, frame: DecodedFrame, page_number: int, job: _PageJob) -> ProcessedPage:
        _raise_if_cancelled(job.cancel_event, job.source, completed=page_number - 1)
        return self._convert_page(frame, page_number, job)

    def _convert_page(self, frame: DecodedFrame, page_number: int, job: _PageJob) -> ProcessedPage:
        normalized = self._normalizer.normalize(frame)
        candidate = self._encoder.encode(normalized, job.mode, job.target, job.source.is_pdf)
        return ProcessedPage.from_candidate(candidate, page_number, job.source.base_name)


def _raise_if_cancelled(cancel_event: Optional[threading.Event], source: SourceDocument, *, completed: int) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.info("Cancelled conversion of %s", source.filename, extra={"completed_pages": completed})
        raise ConversionCancelledError(source.filename, completed_pages=completed)
