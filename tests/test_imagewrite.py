import struct

import pytest

from runic.imagewrite import (
    encode_bmp,
    encode_hdr,
    encode_tga,
    write_bmp,
    write_hdr,
    write_tga,
)


def _decode_tga_rle(payload: bytes, pixel_size: int) -> bytes:
    out = bytearray()
    pos = 0
    while pos < len(payload):
        header = payload[pos]
        pos += 1
        if header & 0x80:
            count = (header & 0x7F) + 1
            out += payload[pos:pos + pixel_size] * count
            pos += pixel_size
        else:
            count = header + 1
            out += payload[pos:pos + count * pixel_size]
            pos += count * pixel_size
    return bytes(out)


def _decode_hdr_planes(payload: bytes, width: int) -> list[bytes]:
    planes = []
    pos = 0
    for _ in range(4):
        plane = bytearray()
        while len(plane) < width:
            count = payload[pos]
            pos += 1
            if count > 128:
                plane += bytes([payload[pos]]) * (count - 128)
                pos += 1
            else:
                plane += payload[pos:pos + count]
                pos += count
        planes.append(bytes(plane))
    assert pos == len(payload)
    return planes


# BMP


def test_bmp_header_fields():
    data = bytes(range(2 * 3 * 3))
    out = encode_bmp(2, 3, 3, data)
    magic, size, _, _, offset = struct.unpack_from("<2sIHHI", out, 0)
    assert magic == b"BM"
    assert offset == 54
    assert size == len(out)
    header_size, width, height, planes, bits = struct.unpack_from("<IIIHH", out, 14)
    assert (header_size, width, height, planes, bits) == (40, 2, 3, 1, 24)


def test_bmp_pixel_is_bgr_and_rows_padded():
    out = encode_bmp(1, 1, 3, bytes([10, 20, 30]))
    assert out[54:57] == bytes([30, 20, 10])
    assert (len(out) - 54) % 4 == 0
    assert set(out[57:]) == {0}


def test_bmp_rows_are_bottom_up():
    out = encode_bmp(1, 2, 3, bytes([1, 2, 3, 4, 5, 6]))
    body = out[54:]
    row_size = len(body) // 2
    assert body[0:3] == bytes([6, 5, 4])
    assert body[row_size:row_size + 3] == bytes([3, 2, 1])


def test_bmp_expands_monochrome():
    out = encode_bmp(1, 1, 1, bytes([7]))
    assert out[54:57] == bytes([7, 7, 7])


def test_bmp_opaque_rgba_matches_rgb():
    rgba = encode_bmp(2, 1, 4, bytes([10, 20, 30, 255, 40, 50, 60, 255]))
    rgb = encode_bmp(2, 1, 3, bytes([10, 20, 30, 40, 50, 60]))
    assert rgba == rgb


def test_bmp_transparent_rgba_shows_pink_background():
    out = encode_bmp(1, 1, 4, bytes([10, 20, 30, 0]))
    assert out[54:57] == bytes([255, 0, 255])


def test_bmp_zero_height_is_header_only():
    assert len(encode_bmp(5, 0, 3, b"")) == 54


@pytest.mark.parametrize(
    "width, height, components, data",
    [(-1, 1, 3, b"\0\0\0"), (1, 1, 5, bytes(5)), (2, 2, 3, bytes(5)), (1, 1, 0, b"")],
)
def test_bmp_rejects_bad_input(width, height, components, data):
    with pytest.raises(ValueError):
        encode_bmp(width, height, components, data)


def test_write_bmp_matches_encoding(tmp_path):
    data = bytes(range(12))
    path = tmp_path / "out.bmp"
    write_bmp(path, 2, 2, 3, data)
    assert path.read_bytes() == encode_bmp(2, 2, 3, data)


# TGA


@pytest.mark.parametrize(
    "components, image_type, bits, alpha_bits",
    [(1, 3, 8, 0), (2, 3, 16, 8), (3, 2, 24, 0), (4, 2, 32, 8)],
)
def test_tga_uncompressed_header(components, image_type, bits, alpha_bits):
    out = encode_tga(3, 2, components, bytes(3 * 2 * components), rle=False)
    fields = struct.unpack_from("<BBBHHBHHHHBB", out, 0)
    assert fields[2] == image_type
    assert (fields[8], fields[9]) == (3, 2)
    assert (fields[10], fields[11]) == (bits, alpha_bits)
    assert len(out) == 18 + 3 * 2 * components


def test_tga_rle_sets_compressed_type():
    out = encode_tga(2, 2, 3, bytes(12))
    assert out[2] == 10


def test_tga_uncompressed_pixels_bgr_with_alpha():
    out = encode_tga(1, 1, 4, bytes([10, 20, 30, 40]), rle=False)
    assert out[18:] == bytes([30, 20, 10, 40])


def test_tga_uniform_row_is_single_run():
    out = encode_tga(4, 1, 3, bytes([9, 8, 7]) * 4)
    assert out[18:] == bytes([0x83, 7, 8, 9])


@pytest.mark.parametrize(
    "components, row_pixels",
    [
        (3, [b"\x01\x02\x03"] * 5 + [b"\x04\x05\x06", b"\x07\x08\x09"] + [b"\x01\x02\x03"] * 3),
        (1, [bytes([i % 7]) for i in range(300)]),
        (4, [b"\x05\x05\x05\x05"] * 200 + [b"\x01\x02\x03\x04"]),
        (2, [b"\x00\x01", b"\x00\x01", b"\x02\x03", b"\x04\x05", b"\x04\x05", b"\x04\x05"]),
    ],
)
def test_tga_rle_decodes_to_uncompressed(components, row_pixels):
    width = len(row_pixels)
    data = b"".join(row_pixels) + b"".join(reversed(row_pixels))
    raw = encode_tga(width, 2, components, data, rle=False)
    packed = encode_tga(width, 2, components, data, rle=True)
    assert _decode_tga_rle(packed[18:], components) == raw[18:]


def test_tga_rejects_short_data():
    with pytest.raises(ValueError):
        encode_tga(4, 4, 3, bytes(10))


def test_write_tga_matches_encoding(tmp_path):
    data = bytes(range(24))
    path = tmp_path / "out.tga"
    write_tga(path, 4, 2, 3, data, rle=False)
    assert path.read_bytes() == encode_tga(4, 2, 3, data, rle=False)


# HDR


def test_hdr_header():
    out = encode_hdr(3, 2, 3, [0.5] * 18)
    assert out.startswith(b"#?RADIANCE\n")
    assert b"FORMAT=32-bit_rle_rgbe\n" in out
    assert b"\n\n-Y 2 +X 3\n" in out


def test_hdr_small_image_uses_flat_rgbe():
    out = encode_hdr(1, 1, 3, [1.0, 1.0, 1.0])
    assert out[-4:] == bytes([128, 128, 128, 129])


def test_hdr_black_pixel_is_zero():
    out = encode_hdr(1, 1, 3, [0.0, 0.0, 0.0])
    assert out[-4:] == bytes(4)


def test_hdr_monochrome_replicates_channel():
    mono = encode_hdr(2, 1, 1, [0.25, 3.0])
    rgb = encode_hdr(2, 1, 3, [0.25, 0.25, 0.25, 3.0, 3.0, 3.0])
    assert mono == rgb


def test_hdr_alpha_is_ignored():
    rgba = encode_hdr(1, 1, 4, [0.1, 0.2, 0.3, 0.9])
    rgb = encode_hdr(1, 1, 3, [0.1, 0.2, 0.3])
    assert rgba == rgb


def test_hdr_wide_scanline_is_run_length_encoded():
    values = [1.0, 1.0, 1.0] * 10 + [0.2, 0.4, 0.8, 5.0, 0.1, 0.3] + [0.0, 0.0, 0.0] * 5
    width = len(values) // 3
    out = encode_hdr(width, 1, 3, values)
    header_end = out.index(b"+X %d\n" % width) + len(b"+X %d\n" % width)
    scan = out[header_end:]
    assert scan[:4] == bytes([2, 2, 0, width])
    planes = _decode_hdr_planes(scan[4:], width)
    for x in range(width):
        single = encode_hdr(1, 1, 3, values[3 * x:3 * x + 3])[-4:]
        assert bytes(plane[x] for plane in planes) == single


@pytest.mark.parametrize("width, height", [(0, 1), (1, 0), (-2, 3)])
def test_hdr_rejects_empty_size(width, height):
    with pytest.raises(ValueError):
        encode_hdr(width, height, 3, [0.0] * 9)


def test_write_hdr_matches_encoding(tmp_path):
    values = [0.5, 1.5, 2.5] * 12
    path = tmp_path / "out.hdr"
    write_hdr(path, 12, 1, 3, values)
    assert path.read_bytes() == encode_hdr(12, 1, 3, values)