"""
Unit tests for candidate planning and encoding
"""
from typing import Dict, List

import pytest

from pagerender import constants
from pagerender.domain.entities.decoded_frame import DecodedFrame
from pagerender.domain.entities.encoding_candidate import EncodingCandidate
from pagerender.domain.exceptions import UnsupportedModeError
from pagerender.domain.services.candidate_encoder import CandidateEncoder, plan_encoding
from pagerender.domain.services.candidate_selector import strictly_smaller, substantially_smaller
from pagerender.domain.value_objects.encoding_params import JpegParams, PngParams, WebpParams
from pagerender.domain.value_objects.image_format import ImageFormat
from pagerender.domain.value_objects.processing_mode import ProcessingMode


class StubCodec:
    """Returns candidates of pre-set sizes per format and records requests."""

    def __init__(self, sizes: Dict[ImageFormat, int]):
        self.sizes = sizes
        self.requests: List[object] = []

    def encode(self, image, params, *, label=""):
        self.requests.append(params)
        return EncodingCandidate(
            format=params.format,
            data=b"\0" * self.sizes[params.format],
            width=4,
            height=3,
            params=params,
        )

    def repack_png(self, image):  # pragma: no cover - not used here
        raise AssertionError("repack not expected")


@pytest.fixture
def frame() -> DecodedFrame:
    return DecodedFrame(image=object(), index=1, width=4, height=3)


class TestPlanEncoding:

    @pytest.mark.parametrize("target", list(ImageFormat))
    @pytest.mark.parametrize("is_pdf", [True, False])
    def test_lossless_is_single_png(self, target, is_pdf):
        plan = plan_encoding(ProcessingMode.LOSSLESS, target, is_pdf)
        assert plan.params == (PngParams(compress_level=9),)

    def test_auto_webp_target(self):
        plan = plan_encoding(ProcessingMode.AUTO, ImageFormat.WEBP, False)
        assert plan.params == (WebpParams(quality=90, method=6),)

    def test_auto_jpeg_target(self):
        plan = plan_encoding(ProcessingMode.AUTO, ImageFormat.JPEG, False)
        (params,) = plan.params
        assert isinstance(params, JpegParams)
        assert params.quality == 90
        assert params.subsampling == "4:4:4"
        assert params.optimize_coding is True

    def test_auto_png_target_races_quantized_png_against_jpeg(self):
        plan = plan_encoding(ProcessingMode.AUTO, ImageFormat.PNG, False)
        png, jpeg = plan.params
        assert png.quantize_colors == constants.QUANTIZE_MAX_COLORS == 1024
        assert jpeg.quality == 95
        assert plan.accept is substantially_smaller

    def test_auto_pdf_skips_quantization(self):
        plan = plan_encoding(ProcessingMode.AUTO, ImageFormat.PNG, True)
        png, jpeg = plan.params
        assert png.quantize_colors is None
        assert plan.formats == (ImageFormat.PNG, ImageFormat.JPEG)

    def test_single_candidate_plans_use_default_comparator(self):
        assert plan_encoding(ProcessingMode.AUTO, ImageFormat.JPEG, False).accept is strictly_smaller

    def test_unknown_mode_rejected(self):
        with pytest.raises(UnsupportedModeError):
            plan_encoding("sideways", ImageFormat.PNG, False)


class TestCandidateEncoder:

    def test_jpeg_fallback_wins_when_much_smaller(self, frame):
        codec = StubCodec({ImageFormat.PNG: 1000, ImageFormat.JPEG: 849})
        chosen = CandidateEncoder(codec).encode(frame, ProcessingMode.AUTO, ImageFormat.PNG, is_pdf=False)
        assert chosen.format is ImageFormat.JPEG
        assert len(codec.requests) == 2

    def test_png_kept_at_threshold(self, frame):
        codec = StubCodec({ImageFormat.PNG: 1000, ImageFormat.JPEG: 850})
        chosen = CandidateEncoder(codec).encode(frame, ProcessingMode.AUTO, ImageFormat.PNG, is_pdf=True)
        assert chosen.format is ImageFormat.PNG

    def test_lossless_encodes_once(self, frame):
        codec = StubCodec({ImageFormat.PNG: 10, ImageFormat.JPEG: 1})
        chosen = CandidateEncoder(codec).encode(frame, ProcessingMode.LOSSLESS, ImageFormat.JPEG, is_pdf=False)
        assert chosen.format is ImageFormat.PNG
        assert codec.requests == [PngParams()]
