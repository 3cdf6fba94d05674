"""Tests for RasterDecoder and FrameDecoder."""
from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from pagerender.domain.entities.source_document import SourceDocument
from pagerender.domain.exceptions import DecodeError
from pagerender.infrastructure.imaging.frame_decoder import FrameDecoder
from pagerender.infrastructure.imaging.raster_decoder import RasterDecoder, image_has_alpha


def animated_gif(frame_count: int) -> bytes:
    frames = [Image.new("RGB", (8, 6), (40 * index, 0, 0)) for index in range(frame_count)]
    buffer = BytesIO()
    frames[0].save(buffer, format="GIF", save_all=True, append_images=frames[1:], duration=100)
    return buffer.getvalue()


def test_single_frame_png(png_bytes):
    frames = RasterDecoder().decode(png_bytes, filename="a.png")

    assert len(frames) == 1
    frame = frames[0]
    assert frame.index == 1
    assert (frame.width, frame.height) == (48, 32)
    assert frame.codec_format == "PNG"
    assert frame.has_alpha is False


def test_multi_frame_gif_keeps_order():
    frames = RasterDecoder().decode(animated_gif(3), filename="anim.gif")

    assert [frame.index for frame in frames] == [1, 2, 3]
    assert all(frame.codec_format == "GIF" for frame in frames)


def test_mpo_jpeg_decodes_primary_image_only(gradient, image_encoder):
    content = image_encoder(gradient(), "MPO", save_all=True, append_images=[gradient(24, 16)])
    assert Image.open(BytesIO(content)).format == "MPO"

    frames = RasterDecoder().decode(content, filename="camera.jpg")

    assert len(frames) == 1
    assert frames[0].codec_format == "JPEG"
    assert (frames[0].width, frames[0].height) == (48, 32)


def test_alpha_is_detected(image_encoder):
    content = image_encoder(Image.new("RGBA", (4, 4), (0, 0, 0, 0)), "PNG")
    (frame,) = RasterDecoder().decode(content)
    assert frame.has_alpha is True


def test_icc_profile_is_captured(image_encoder):
    from PIL import ImageCms

    profile = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()
    content = image_encoder(Image.new("RGB", (4, 4), (10, 20, 30)), "PNG", icc_profile=profile)
    (frame,) = RasterDecoder().decode(content)
    assert frame.icc_profile == profile


def test_palette_transparency_counts_as_alpha():
    image = Image.new("P", (2, 2), 0)
    image.info["transparency"] = 0
    assert image_has_alpha(image)


@pytest.mark.parametrize("content", [b"", b"plain text, not an image"])
def test_garbage_raises_decode_error(content):
    with pytest.raises(DecodeError):
        RasterDecoder().decode(content, filename="junk.bin")


def test_truncated_image_raises_decode_error(png_bytes):
    with pytest.raises(DecodeError):
        RasterDecoder().decode(png_bytes[: len(png_bytes) // 2], filename="cut.png")


class TestFrameDecoder:

    def test_pdf_goes_to_renderer(self, pdf_factory):
        frames = FrameDecoder().decode(SourceDocument("doc.PDF", pdf_factory(2)))
        assert [frame.codec_format for frame in frames] == ["PDF", "PDF"]

    def test_images_go_to_raster_decoder(self, jpeg_bytes):
        frames = FrameDecoder().decode(SourceDocument("photo.jpg", jpeg_bytes))
        assert frames[0].codec_format == "JPEG"
