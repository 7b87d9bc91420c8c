"""Baseline JPEG encoding with standard quantisation and Huffman tables."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

_ZIGZAG = (
    0, 1, 5, 6, 14, 15, 27, 28, 2, 4, 7, 13, 16, 26, 29, 42, 3, 8, 12, 17, 25, 30, 41, 43,
    9, 11, 18, 24, 31, 40, 44, 53, 10, 19, 23, 32, 39, 45, 52, 54, 20, 22, 33, 38, 46, 51,
    55, 60, 21, 34, 37, 47, 50, 56, 59, 61, 35, 36, 48, 49, 57, 58, 62, 63,
)

_DC_LUMINANCE_COUNTS = (0, 1, 5, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0)
_DC_LUMINANCE_VALUES = tuple(range(12))
_AC_LUMINANCE_COUNTS = (0, 2, 1, 3, 3, 2, 4, 3, 5, 5, 4, 4, 0, 0, 1, 0x7D)
_AC_LUMINANCE_VALUES = (
    0x01, 0x02, 0x03, 0x00, 0x04, 0x11, 0x05, 0x12, 0x21, 0x31, 0x41, 0x06, 0x13, 0x51, 0x61, 0x07,
    0x22, 0x71, 0x14, 0x32, 0x81, 0x91, 0xA1, 0x08, 0x23, 0x42, 0xB1, 0xC1, 0x15, 0x52, 0xD1, 0xF0,
    0x24, 0x33, 0x62, 0x72, 0x82, 0x09, 0x0A, 0x16, 0x17, 0x18, 0x19, 0x1A, 0x25, 0x26, 0x27, 0x28,
    0x29, 0x2A, 0x34, 0x35, 0x36, 0x37, 0x38, 0x39, 0x3A, 0x43, 0x44, 0x45, 0x46, 0x47, 0x48, 0x49,
    0x4A, 0x53, 0x54, 0x55, 0x56, 0x57, 0x58, 0x59, 0x5A, 0x63, 0x64, 0x65, 0x66, 0x67, 0x68, 0x69,
    0x6A, 0x73, 0x74, 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A, 0x83, 0x84, 0x85, 0x86, 0x87, 0x88, 0x89,
    0x8A, 0x92, 0x93, 0x94, 0x95, 0x96, 0x97, 0x98, 0x99, 0x9A, 0xA2, 0xA3, 0xA4, 0xA5, 0xA6, 0xA7,
    0xA8, 0xA9, 0xAA, 0xB2, 0xB3, 0xB4, 0xB5, 0xB6, 0xB7, 0xB8, 0xB9, 0xBA, 0xC2, 0xC3, 0xC4, 0xC5,
    0xC6, 0xC7, 0xC8, 0xC9, 0xCA, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7, 0xD8, 0xD9, 0xDA, 0xE1, 0xE2,
    0xE3, 0xE4, 0xE5, 0xE6, 0xE7, 0xE8, 0xE9, 0xEA, 0xF1, 0xF2, 0xF3, 0xF4, 0xF5, 0xF6, 0xF7, 0xF8,
    0xF9, 0xFA,
)
_DC_CHROMINANCE_COUNTS = (0, 3, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0)
_DC_CHROMINANCE_VALUES = tuple(range(12))
_AC_CHROMINANCE_COUNTS = (0, 2, 1, 2, 4, 4, 3, 4, 7, 5, 4, 4, 0, 1, 2, 0x77)
_AC_CHROMINANCE_VALUES = (
    0x00, 0x01, 0x02, 0x03, 0x11, 0x04, 0x05, 0x21, 0x31, 0x06, 0x12, 0x41, 0x51, 0x07, 0x61, 0x71,
    0x13, 0x22, 0x32, 0x81, 0x08, 0x14, 0x42, 0x91, 0xA1, 0xB1, 0xC1, 0x09, 0x23, 0x33, 0x52, 0xF0,
    0x15, 0x62, 0x72, 0xD1, 0x0A, 0x16, 0x24, 0x34, 0xE1, 0x25, 0xF1, 0x17, 0x18, 0x19, 0x1A, 0x26,
    0x27, 0x28, 0x29, 0x2A, 0x35, 0x36, 0x37, 0x38, 0x39, 0x3A, 0x43, 0x44, 0x45, 0x46, 0x47, 0x48,
    0x49, 0x4A, 0x53, 0x54, 0x55, 0x56, 0x57, 0x58, 0x59, 0x5A, 0x63, 0x64, 0x65, 0x66, 0x67, 0x68,
    0x69, 0x6A, 0x73, 0x74, 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A, 0x82, 0x83, 0x84, 0x85, 0x86, 0x87,
    0x88, 0x89, 0x8A, 0x92, 0x93, 0x94, 0x95, 0x96, 0x97, 0x98, 0x99, 0x9A, 0xA2, 0xA3, 0xA4, 0xA5,
    0xA6, 0xA7, 0xA8, 0xA9, 0xAA, 0xB2, 0xB3, 0xB4, 0xB5, 0xB6, 0xB7, 0xB8, 0xB9, 0xBA, 0xC2, 0xC3,
    0xC4, 0xC5, 0xC6, 0xC7, 0xC8, 0xC9, 0xCA, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7, 0xD8, 0xD9, 0xDA,
    0xE2, 0xE3, 0xE4, 0xE5, 0xE6, 0xE7, 0xE8, 0xE9, 0xEA, 0xF2, 0xF3, 0xF4, 0xF5, 0xF6, 0xF7, 0xF8,
    0xF9, 0xFA,
)

_Y_QUANT = (
    16, 11, 10, 16, 24, 40, 51, 61, 12, 12, 14, 19, 26, 58, 60, 55, 14, 13, 16, 24, 40, 57, 69, 56,
    14, 17, 22, 29, 51, 87, 80, 62, 18, 22, 37, 56, 68, 109, 103, 77, 24, 35, 55, 64, 81, 104, 113, 92,
    49, 64, 78, 87, 103, 121, 120, 101, 72, 92, 95, 98, 112, 100, 103, 99,
)
_UV_QUANT = (
    17, 18, 24, 47, 99, 99, 99, 99, 18, 21, 26, 66, 99, 99, 99, 99, 24, 26, 56, 99, 99, 99, 99, 99,
    47, 66, 99, 99, 99, 99, 99, 99,
) + (99,) * 32

_SQRT8 = 2.828427125
_AASF = tuple(
    f * _SQRT8
    for f in (1.0, 1.387039845, 1.306562965, 1.175875602, 1.0, 0.785694958, 0.541196100, 0.275899379)
)

_FILL_BITS = (0x7F, 7)


def _huffman_table(counts: Sequence[int], values: Sequence[int]) -> list[tuple[int, int]]:
    """Build a symbol -> (code, length) table from canonical code-length counts."""
    table = [(0, 0)] * 256
    symbols = iter(values)
    code = 0
    for length, count in enumerate(counts, start=1):
        for _ in range(count):
            table[next(symbols)] = (code, length)
            code += 1
        code <<= 1
    return table


_YDC_HT = _huffman_table(_DC_LUMINANCE_COUNTS, _DC_LUMINANCE_VALUES)
_YAC_HT = _huffman_table(_AC_LUMINANCE_COUNTS, _AC_LUMINANCE_VALUES)
_UVDC_HT = _huffman_table(_DC_CHROMINANCE_COUNTS, _DC_CHROMINANCE_VALUES)
_UVAC_HT = _huffman_table(_AC_CHROMINANCE_COUNTS, _AC_CHROMINANCE_VALUES)


class _BitWriter:
    """Most-significant-bit-first bit packer with JPEG 0xFF byte stuffing."""

    def __init__(self, out: bytearray) -> None:
        self.out = out
        self._buffer = 0
        self._count = 0

    def write(self, code: int, bits: int) -> None:
        self._count += bits
        self._buffer |= code << (24 - self._count)
        while self._count >= 8:
            byte = (self._buffer >> 16) & 0xFF
            self.out.append(byte)
            if byte == 0xFF:
                self.out.append(0)
            self._buffer = (self._buffer << 8) & 0xFFFFFF
            self._count -= 8


def _dct(values: Sequence[float]) -> list[float]:
    """One-dimensional scaled forward DCT of eight samples (AAN algorithm)."""
    d0, d1, d2, d3, d4, d5, d6, d7 = values

    tmp0, tmp7 = d0 + d7, d0 - d7
    tmp1, tmp6 = d1 + d6, d1 - d6
    tmp2, tmp5 = d2 + d5, d2 - d5
    tmp3, tmp4 = d3 + d4, d3 - d4

    tmp10, tmp13 = tmp0 + tmp3, tmp0 - tmp3
    tmp11, tmp12 = tmp1 + tmp2, tmp1 - tmp2

    out0 = tmp10 + tmp11
    out4 = tmp10 - tmp11
    z1 = (tmp12 + tmp13) * 0.707106781
    out2 = tmp13 + z1
    out6 = tmp13 - z1

    tmp10 = tmp4 + tmp5
    tmp11 = tmp5 + tmp6
    tmp12 = tmp6 + tmp7

    z5 = (tmp10 - tmp12) * 0.382683433
    z2 = tmp10 * 0.541196100 + z5
    z4 = tmp12 * 1.306562965 + z5
    z3 = tmp11 * 0.707106781

    z11 = tmp7 + z3
    z13 = tmp7 - z3

    return [out0, z11 + z4, out2, z13 - z2, out4, z13 + z2, out6, z11 - z4]


def _calc_bits(value: int) -> tuple[int, int]:
    """Return the (code, size) pair for a signed coefficient."""
    size = max(1, abs(value).bit_length())
    if value < 0:
        value -= 1
    return value & ((1 << size) - 1), size


def _process_block(
    writer: _BitWriter,
    block: list[float],
    fdtbl: Sequence[float],
    dc: int,
    htdc: Sequence[tuple[int, int]],
    htac: Sequence[tuple[int, int]],
) -> int:
    """Transform, quantise and entropy-code one 8x8 block; return its DC value."""
    eob = htac[0x00]
    zero_run16 = htac[0xF0]

    for offset in range(0, 64, 8):
        block[offset:offset + 8] = _dct(block[offset:offset + 8])
    for column in range(8):
        block[column::8] = _dct(block[column::8])

    du = [0] * 64
    for i, (coefficient, scale) in enumerate(zip(block, fdtbl)):
        v = coefficient * scale
        du[_ZIGZAG[i]] = int(v - 0.5 if v < 0 else v + 0.5)

    diff = du[0] - dc
    if diff == 0:
        writer.write(*htdc[0])
    else:
        code, size = _calc_bits(diff)
        writer.write(*htdc[size])
        writer.write(code, size)

    end = 63
    while end > 0 and du[end] == 0:
        end -= 1
    if end == 0:
        writer.write(*eob)
        return du[0]

    i = 1
    while i <= end:
        start = i
        while i <= end and du[i] == 0:
            i += 1
        zeros = i - start
        if zeros >= 16:
            for _ in range(zeros >> 4):
                writer.write(*zero_run16)
            zeros &= 15
        code, size = _calc_bits(du[i])
        writer.write(*htac[(zeros << 4) + size])
        writer.write(code, size)
        i += 1
    if end != 63:
        writer.write(*eob)
    return du[0]


def _quant_tables(quality: int) -> tuple[bytes, bytes]:
    quality = quality or 90
    quality = min(max(quality, 1), 100)
    scale = 5000 // quality if quality < 50 else 200 - quality * 2

    y_table = bytearray(64)
    uv_table = bytearray(64)
    for i, (yq, uvq) in enumerate(zip(_Y_QUANT, _UV_QUANT)):
        y_table[_ZIGZAG[i]] = min(max((yq * scale + 50) // 100, 1), 255)
        uv_table[_ZIGZAG[i]] = min(max((uvq * scale + 50) // 100, 1), 255)
    return bytes(y_table), bytes(uv_table)


def _divisors(table: bytes) -> list[float]:
    return [
        1.0 / (table[_ZIGZAG[row * 8 + col]] * _AASF[row] * _AASF[col])
        for row in range(8)
        for col in range(8)
    ]


def _header(width: int, height: int, y_table: bytes, uv_table: bytes) -> bytes:
    head0 = bytes(
        (0xFF, 0xD8, 0xFF, 0xE0, 0, 0x10, *b"JFIF", 0, 1, 1, 0, 0, 1, 0, 1, 0, 0,
         0xFF, 0xDB, 0, 0x84, 0)
    )
    head1 = bytes(
        (0xFF, 0xC0, 0, 0x11, 8, (height >> 8) & 0xFF, height & 0xFF,
         (width >> 8) & 0xFF, width & 0xFF,
         3, 1, 0x11, 0, 2, 0x11, 1, 3, 0x11, 1, 0xFF, 0xC4, 0x01, 0xA2, 0)
    )
    head2 = bytes((0xFF, 0xDA, 0, 0xC, 3, 1, 0, 2, 0x11, 3, 0x11, 0, 0x3F, 0))
    return b"".join(
        (
            head0,
            y_table,
            b"\x01",
            uv_table,
            head1,
            bytes(_DC_LUMINANCE_COUNTS),
            bytes(_DC_LUMINANCE_VALUES),
            b"\x10",
            bytes(_AC_LUMINANCE_COUNTS),
            bytes(_AC_LUMINANCE_VALUES),
            b"\x01",
            bytes(_DC_CHROMINANCE_COUNTS),
            bytes(_DC_CHROMINANCE_VALUES),
            b"\x11",
            bytes(_AC_CHROMINANCE_COUNTS),
            bytes(_AC_CHROMINANCE_VALUES),
            head2,
        )
    )


def encode_jpeg(
    width: int, height: int, components: int, data: bytes, quality: int = 90
) -> bytes:
    """Encode 8-bit pixels (1=Y, 2=YA, 3=RGB, 4=RGBA) as a baseline JPEG.

    Alpha is ignored. ``quality`` is clamped to 1..100; 0 means 90.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid image size {width}x{height}")
    if not 1 <= components <= 4:
        raise ValueError(f"components must be between 1 and 4, got {components}")
    pixels = bytes(data)
    needed = width * height * components
    if len(pixels) < needed:
        raise ValueError(f"image data holds {len(pixels)} bytes, {needed} needed")

    y_table, uv_table = _quant_tables(quality)
    fdtbl_y = _divisors(y_table)
    fdtbl_uv = _divisors(uv_table)

    out = bytearray(_header(width, height, y_table, uv_table))
    writer = _BitWriter(out)

    green_offset = 1 if components > 2 else 0
    blue_offset = 2 if components > 2 else 0
    dc_y = dc_u = dc_v = 0
    for y in range(0, height, 8):
        for x in range(0, width, 8):
            y_block: list[float] = []
            u_block: list[float] = []
            v_block: list[float] = []
            for row in range(y, y + 8):
                source_row = min(row, height - 1)
                for col in range(x, x + 8):
                    p = (source_row * width + min(col, width - 1)) * components
                    r = pixels[p]
                    g = pixels[p + green_offset]
                    b = pixels[p + blue_offset]
                    y_block.append(0.29900 * r + 0.58700 * g + 0.11400 * b - 128)
                    u_block.append(-0.16874 * r - 0.33126 * g + 0.50000 * b)
                    v_block.append(0.50000 * r - 0.41869 * g - 0.08131 * b)
            dc_y = _process_block(writer, y_block, fdtbl_y, dc_y, _YDC_HT, _YAC_HT)
            dc_u = _process_block(writer, u_block, fdtbl_uv, dc_u, _UVDC_HT, _UVAC_HT)
            dc_v = _process_block(writer, v_block, fdtbl_uv, dc_v, _UVDC_HT, _UVAC_HT)

    writer.write(*_FILL_BITS)
    out += b"\xff\xd9"
    return bytes(out)


def write_jpeg(
    path: str | Path, width: int, height: int, components: int, data: bytes, quality: int = 90
) -> None:
    """Write a JPEG image to ``path``."""
    Path(path).write_bytes(encode_jpeg(width, height, components, data, quality))