"""Tests for the OpenCV and Pillow codec adapters."""

import io

import numpy as np
import pytest
from PIL import Image

from models.errors import DecodeError
from models.pixel_buffer import PixelBuffer
from engines import OpenCVCodec, PillowCodec, DctCodec, get_codec
from engines.scaling import fit_long_edge, needs_downscale
from utils.image_io import encode_png
from utils.test_images import generate_gradient, generate_photo_like


@pytest.fixture(params=[OpenCVCodec, PillowCodec], ids=['opencv', 'pillow'])
def codec(request):
    return request.param()


def test_fit_long_edge_preserves_aspect():
    assert fit_long_edge(3000, 2000, 1024) == (1024, 683)
    assert fit_long_edge(2000, 3000, 1024) == (683, 1024)
    assert fit_long_edge(500, 500, 64) == (64, 64)
    assert fit_long_edge(10000, 1, 64) == (64, 1)


def test_needs_downscale_only_above_ceiling():
    assert needs_downscale(1025, 10, 1024)
    assert needs_downscale(10, 1025, 1024)
    assert not needs_downscale(1024, 1024, 1024)


def test_decode_png_to_rgb(codec):
    image = generate_gradient(64, 32)
    buffer = codec.decode(encode_png(image))
    assert (buffer.width, buffer.height) == (64, 32)
    assert np.array_equal(buffer.pixels, image)


@pytest.mark.parametrize('data', [b'', b'not an image at all', b'\xff\xd8\xff'])
def test_decode_garbage_raises(codec, data):
    with pytest.raises(DecodeError):
        codec.decode(data)


def test_resize_hits_requested_long_edge(codec):
    buffer = PixelBuffer(generate_gradient(300, 200))
    resized = codec.resize(buffer, 150)
    assert (resized.width, resized.height) == (150, 100)


def test_resize_to_same_size_returns_buffer(codec):
    buffer = PixelBuffer(generate_gradient(40, 20))
    assert codec.resize(buffer, 40) is buffer


def test_lower_quality_gives_smaller_output(codec):
    buffer = PixelBuffer(generate_photo_like(256, 256))
    assert len(codec.encode(buffer, 10)) < len(codec.encode(buffer, 90))


def test_encode_is_deterministic(codec):
    buffer = PixelBuffer(generate_photo_like(128, 96))
    assert codec.encode(buffer, 60) == codec.encode(buffer, 60)


def test_encoded_output_decodes_at_same_size(codec):
    buffer = PixelBuffer(generate_photo_like(120, 80))
    decoded = codec.decode(codec.encode(buffer, 75))
    assert (decoded.width, decoded.height) == (120, 80)


def test_encode_rejects_out_of_range_quality(codec):
    buffer = PixelBuffer(generate_gradient(16, 16))
    with pytest.raises(ValueError):
        codec.encode(buffer, 0)


def test_pillow_applies_exif_orientation():
    """Orientation 6 (rotate 90) swaps width and height on decode."""
    img = Image.fromarray(generate_gradient(40, 20))
    exif = img.getexif()
    exif[0x0112] = 6
    buf = io.BytesIO()
    img.save(buf, 'JPEG', exif=exif)
    
    buffer = PillowCodec().decode(buf.getvalue())
    
    assert (buffer.width, buffer.height) == (20, 40)


def test_pillow_flattens_transparency_onto_white():
    rgba = np.zeros((8, 8, 4), dtype=np.uint8)
    buf = io.BytesIO()
    Image.fromarray(rgba).save(buf, 'PNG')
    
    buffer = PillowCodec().decode(buf.getvalue())
    
    assert np.all(buffer.pixels == 255)


def test_webp_formats_available():
    buffer = PixelBuffer(generate_gradient(32, 32))
    assert OpenCVCodec('webp').encode(buffer, 50)[:4] == b'RIFF'
    assert PillowCodec('webp').encode(buffer, 50)[:4] == b'RIFF'


def test_get_codec_by_name():
    assert isinstance(get_codec('opencv'), OpenCVCodec)
    assert isinstance(get_codec('pillow', fmt='WEBP'), PillowCodec)
    assert isinstance(get_codec('dct', subsampling='4:4:4'), DctCodec)
    with pytest.raises(ValueError):
        get_codec('heic')


def test_unknown_formats_rejected():
    with pytest.raises(ValueError):
        OpenCVCodec('gif')
    with pytest.raises(ValueError):
        PillowCodec('BMP')
