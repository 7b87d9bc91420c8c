"""Encoders for uncompressed BMP, TGA (optionally run-length encoded) and Radiance HDR images."""

from __future__ import annotations

import math
import struct
from pathlib import Path
from typing import Iterator, Sequence

_PINK = (255, 0, 255)
_HDR_HEADER = b"#?RADIANCE\n# Written by stb_image_write.h\nFORMAT=32-bit_rle_rgbe\n"


def _check_image(width: int, height: int, components: int, size: int) -> None:
    if width < 0 or height < 0:
        raise ValueError(f"invalid image size {width}x{height}")
    if not 1 <= components <= 4:
        raise ValueError(f"components must be between 1 and 4, got {components}")
    needed = width * height * components
    if size < needed:
        raise ValueError(f"image data holds {size} values, {needed} needed")


def _composite(value: int, background: int, alpha: int) -> int:
    # Integer division truncating toward zero, as for signed C ints.
    product = (value - background) * alpha
    quotient = abs(product) // 255
    if product < 0:
        quotient = -quotient
    return (background + quotient) & 0xFF


def _encode_pixel(pixel: bytes, write_alpha: bool, expand_mono: bool) -> bytes:
    """Encode one pixel in BGR order, optionally followed by its alpha."""
    out = bytearray()
    if len(pixel) <= 2:
        out += bytes((pixel[0],) * 3) if expand_mono else pixel[:1]
    elif len(pixel) == 4 and not write_alpha:
        blended = [_composite(pixel[k], _PINK[k], pixel[3]) for k in range(3)]
        out += bytes(reversed(blended))
    else:
        out += bytes((pixel[2], pixel[1], pixel[0]))
    if write_alpha:
        out.append(pixel[-1])
    return bytes(out)


def _rows_bottom_up(data: bytes, width: int, height: int, components: int) -> Iterator[list[bytes]]:
    stride = width * components
    for j in reversed(range(height)):
        row = data[j * stride:(j + 1) * stride]
        yield [row[i * components:(i + 1) * components] for i in range(width)]


def encode_bmp(width: int, height: int, components: int, data: bytes) -> bytes:
    """Encode 8-bit pixels as a 24-bit uncompressed BMP.

    Grey images are expanded to RGB; RGBA is blended over a pink background.
    """
    data = bytes(data)
    _check_image(width, height, components, len(data))
    pad = (-width * 3) & 3
    file_size = (14 + 40 + (width * 3 + pad) * height) & 0xFFFFFFFF
    out = bytearray(struct.pack("<2sIHHI", b"BM", file_size, 0, 0, 14 + 40))
    out += struct.pack(
        "<IIIHHIIIIII",
        40, width & 0xFFFFFFFF, height & 0xFFFFFFFF, 1, 24, 0, 0, 0, 0, 0, 0,
    )
    for row in _rows_bottom_up(data, width, height, components):
        for pixel in row:
            out += _encode_pixel(pixel, write_alpha=False, expand_mono=True)
        out += bytes(pad)
    return bytes(out)


def _rle_packets(row: list[bytes]) -> Iterator[tuple[bool, list[bytes]]]:
    """Split a row into (is_raw, pixels) packets of at most 128 pixels."""
    width = len(row)
    i = 0
    while i < width:
        length = 1
        raw = True
        if i < width - 1:
            length += 1
            raw = row[i] != row[i + 1]
            if raw:
                prev = i
                for k in range(i + 2, width):
                    if length >= 128:
                        break
                    if row[prev] != row[k]:
                        prev += 1
                        length += 1
                    else:
                        length -= 1
                        break
            else:
                for k in range(i + 2, width):
                    if length >= 128 or row[i] != row[k]:
                        break
                    length += 1
        yield raw, row[i:i + length]
        i += length


def encode_tga(width: int, height: int, components: int, data: bytes, rle: bool = True) -> bytes:
    """Encode 8-bit pixels as a TGA image, run-length encoded unless ``rle`` is false."""
    data = bytes(data)
    _check_image(width, height, components, len(data))
    has_alpha = components in (2, 4)
    color_bytes = components - 1 if has_alpha else components
    image_type = 3 if color_bytes < 2 else 2
    if rle:
        image_type += 8
    out = bytearray(
        struct.pack(
            "<BBBHHBHHHHBB",
            0, 0, image_type, 0, 0, 0, 0, 0,
            width & 0xFFFF, height & 0xFFFF,
            (color_bytes + has_alpha) * 8, has_alpha * 8,
        )
    )
    for row in _rows_bottom_up(data, width, height, components):
        if not rle:
            for pixel in row:
                out += _encode_pixel(pixel, has_alpha, expand_mono=False)
            continue
        for raw, pixels in _rle_packets(row):
            if raw:
                out.append(len(pixels) - 1)
                for pixel in pixels:
                    out += _encode_pixel(pixel, has_alpha, expand_mono=False)
            else:
                out.append((len(pixels) - 129) & 0xFF)
                out += _encode_pixel(pixels[0], has_alpha, expand_mono=False)
    return bytes(out)


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _linear_to_rgbe(linear: Sequence[float]) -> bytes:
    red, green, blue = (_f32(c) for c in linear)
    max_comp = max(red, max(green, blue))
    if max_comp < 1e-32:
        return bytes(4)
    mantissa, exponent = math.frexp(max_comp)
    normalize = _f32(_f32(mantissa * 256.0) / max_comp)
    channels = bytes(int(_f32(c * normalize)) & 0xFF for c in (red, green, blue))
    return channels + bytes(((exponent + 128) & 0xFF,))


def _scanline_rgbe(values: Sequence[float], width: int, components: int) -> list[bytes]:
    pixels = []
    for x in range(width):
        base = x * components
        if components >= 3:
            linear = values[base:base + 3]
        else:
            linear = (values[base],) * 3
        pixels.append(_linear_to_rgbe(linear))
    return pixels


def _rle_plane(plane: bytes) -> bytes:
    out = bytearray()
    width = len(plane)
    x = 0
    while x < width:
        r = x
        while r + 2 < width:
            if plane[r] == plane[r + 1] == plane[r + 2]:
                break
            r += 1
        if r + 2 >= width:
            r = width
        while x < r:
            length = min(r - x, 128)
            out.append(length)
            out += plane[x:x + length]
            x += length
        if r + 2 < width:
            while r < width and plane[r] == plane[x]:
                r += 1
            while x < r:
                length = min(r - x, 127)
                out.append(length + 128)
                out.append(plane[x])
                x += length
    return bytes(out)


def _encode_hdr_scanline(values: Sequence[float], width: int, components: int) -> bytes:
    pixels = _scanline_rgbe(values, width, components)
    if width < 8 or width >= 32768:
        return b"".join(pixels)
    out = bytearray((2, 2, (width >> 8) & 0xFF, width & 0xFF))
    for channel in range(4):
        out += _rle_plane(bytes(pixel[channel] for pixel in pixels))
    return bytes(out)


def encode_hdr(width: int, height: int, components: int, data: Sequence[float]) -> bytes:
    """Encode linear float pixels as a Radiance RGBE image."""
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid image size {width}x{height}")
    values = list(data)
    _check_image(width, height, components, len(values))
    out = bytearray(_HDR_HEADER)
    out += f"EXPOSURE=          1.0000000000000\n\n-Y {height} +X {width}\n".encode("ascii")
    stride = width * components
    for i in range(height):
        out += _encode_hdr_scanline(values[i * stride:(i + 1) * stride], width, components)
    return bytes(out)


def write_bmp(path: str | Path, width: int, height: int, components: int, data: bytes) -> None:
    """Write a BMP image to ``path``."""
    Path(path).write_bytes(encode_bmp(width, height, components, data))


def write_tga(
    path: str | Path, width: int, height: int, components: int, data: bytes, rle: bool = True
) -> None:
    """Write a TGA image to ``path``."""
    Path(path).write_bytes(encode_tga(width, height, components, data, rle))


def write_hdr(
    path: str | Path, width: int, height: int, components: int, data: Sequence[float]
) -> None:
    """Write a Radiance HDR image to ``path``."""
    Path(path).write_bytes(encode_hdr(width, height, components, data))