"""Final conversion output: pages and the document that owns them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence, Tuple

from pagerender import constants
from pagerender.domain.entities.encoding_candidate import EncodingCandidate
from pagerender.domain.value_objects.image_format import ImageFormat


def suggested_file_name(base_name: str, page_number: int, image_format: ImageFormat) -> str:
    """
    Build the download name for a page.

    Examples:
        >>> suggested_file_name("invoice", 7, ImageFormat.PNG)
        'invoice-page-007.png'
    """
    return constants.SUGGESTED_NAME_TEMPLATE.format(
        base_name=base_name,
        page_number=page_number,
        extension=image_format.extension,
    )


@dataclass(frozen=True)
class ProcessedPage:
    """One encoded page owned by the caller after conversion."""

    page_number: int
    mime_type: str
    file_extension: str
    suggested_file_name: str
    width: int
    height: int
    data: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")

    @classmethod
    def from_candidate(cls, candidate: EncodingCandidate, page_number: int, base_name: str) -> ProcessedPage:
        return cls(
            page_number=page_number,
            mime_type=candidate.format.mime_type,
            file_extension=candidate.format.extension,
            suggested_file_name=suggested_file_name(base_name, page_number, candidate.format),
            width=candidate.width,
            height=candidate.height,
            data=candidate.data,
        )

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ProcessedDocument:
    """Converted file; pages are numbered 1..N in source order."""

    original_file_name: str
    pages: Tuple[ProcessedPage, ...] = ()

    def __post_init__(self) -> None:
        pages = tuple(self.pages)
        for expected, page in enumerate(pages, start=1):
            if page.page_number != expected:
                raise ValueError(
                    f"page numbers must run 1..{len(pages)} in order; "
                    f"found {page.page_number} at position {expected}"
                )
        object.__setattr__(self, "pages", pages)

    @classmethod
    def from_pages(cls, original_file_name: str, pages: Sequence[ProcessedPage]) -> ProcessedDocument:
        return cls(original_file_name=original_file_name, pages=tuple(pages))

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def total_bytes(self) -> int:
        return sum(page.size_bytes for page in self.pages)

    def __iter__(self) -> Iterator[ProcessedPage]:
        return iter(self.pages)
