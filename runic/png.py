"""PNG encoding with a small built-in DEFLATE compressor using fixed Huffman codes."""

from __future__ import annotations

import struct
import zlib
from pathlib import Path

_U32 = 0xFFFFFFFF
_HASH_SIZE = 16384
_WINDOW = 32768
_MAX_MATCH = 258

_LENGTH_BASE = (
    3, 4, 5, 6, 7, 8, 9, 10, 11, 13, 15, 17, 19, 23, 27, 31, 35, 43, 51, 59,
    67, 83, 99, 115, 131, 163, 195, 227, 258, 259,
)
_LENGTH_EXTRA = (
    0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3,
    4, 4, 4, 4, 5, 5, 5, 5, 0,
)
_DIST_BASE = (
    1, 2, 3, 4, 5, 7, 9, 13, 17, 25, 33, 49, 65, 97, 129, 193, 257, 385, 513, 769,
    1025, 1537, 2049, 3073, 4097, 6145, 8193, 12289, 16385, 24577, 32768,
)
_DIST_EXTRA = (
    0, 0, 0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8,
    9, 9, 10, 10, 11, 11, 12, 12, 13, 13,
)

_SIGNATURE = bytes((137, 80, 78, 71, 13, 10, 26, 10))
_COLOR_TYPES = {1: 0, 2: 4, 3: 2, 4: 6}

# Filter strategies per candidate index; the first row has no row above it.
_ROW_FILTERS = (0, 1, 2, 3, 4)
_FIRST_ROW_FILTERS = (0, 1, 0, 5, 6)


def _bit_reverse(code: int, bits: int) -> int:
    result = 0
    for _ in range(bits):
        result = (result << 1) | (code & 1)
        code >>= 1
    return result


class _BitWriter:
    """Least-significant-bit-first bit packer for DEFLATE streams."""

    def __init__(self, out: bytearray) -> None:
        self.out = out
        self._buffer = 0
        self._count = 0

    def add(self, code: int, bits: int) -> None:
        self._buffer |= code << self._count
        self._count += bits
        while self._count >= 8:
            self.out.append(self._buffer & 0xFF)
            self._buffer >>= 8
            self._count -= 8

    def huffman(self, symbol: int) -> None:
        """Emit a literal/length symbol with the fixed Huffman code."""
        if symbol <= 143:
            self.add(_bit_reverse(0x30 + symbol, 8), 8)
        elif symbol <= 255:
            self.add(_bit_reverse(0x190 + symbol - 144, 9), 9)
        elif symbol <= 279:
            self.add(_bit_reverse(symbol - 256, 7), 7)
        else:
            self.add(_bit_reverse(0xC0 + symbol - 280, 8), 8)

    def pad_to_byte(self) -> None:
        while self._count:
            self.add(0, 1)


def _zhash(data: bytes, i: int) -> int:
    h = data[i] + (data[i + 1] << 8) + (data[i + 2] << 16)
    h ^= (h << 3) & _U32
    h = (h + (h >> 5)) & _U32
    h ^= (h << 4) & _U32
    h = (h + (h >> 17)) & _U32
    h ^= (h << 25) & _U32
    h = (h + (h >> 6)) & _U32
    return h & (_HASH_SIZE - 1)


def _match_length(data: bytes, a: int, b: int, limit: int) -> int:
    limit = min(limit, _MAX_MATCH)
    k = 0
    while k < limit and data[a + k] == data[b + k]:
        k += 1
    return k


def zlib_compress(data: bytes, quality: int = 8) -> bytes:
    """Compress ``data`` into a zlib stream with one fixed-Huffman DEFLATE block.

    ``quality`` bounds the hash chain length (at least 5); higher values
    search further for matches.
    """
    data = bytes(data)
    size = len(data)
    quality = max(quality, 5)

    writer = _BitWriter(bytearray(b"\x78\x5e"))
    writer.add(1, 1)  # final block
    writer.add(1, 2)  # fixed Huffman codes

    table: dict[int, list[int]] = {}
    i = 0
    while i < size - 3:
        chain = table.setdefault(_zhash(data, i), [])
        best = 3
        best_pos: int | None = None
        for pos in chain:
            if pos > i - _WINDOW:
                length = _match_length(data, pos, i, size - i)
                if length >= best:
                    best, best_pos = length, pos
        if len(chain) == 2 * quality:
            del chain[:quality]
        chain.append(i)

        if best_pos is not None:
            # Lazy matching: prefer a literal if the next byte starts a longer match.
            for pos in table.get(_zhash(data, i + 1), ()):
                if pos > i - (_WINDOW - 1) and _match_length(data, pos, i + 1, size - i - 1) > best:
                    best_pos = None
                    break

        if best_pos is not None:
            distance = i - best_pos
            j = 0
            while best > _LENGTH_BASE[j + 1] - 1:
                j += 1
            writer.huffman(j + 257)
            if _LENGTH_EXTRA[j]:
                writer.add(best - _LENGTH_BASE[j], _LENGTH_EXTRA[j])
            j = 0
            while distance > _DIST_BASE[j + 1] - 1:
                j += 1
            writer.add(_bit_reverse(j, 5), 5)
            if _DIST_EXTRA[j]:
                writer.add(distance - _DIST_BASE[j], _DIST_EXTRA[j])
            i += best
        else:
            writer.huffman(data[i])
            i += 1

    for byte in data[i:]:
        writer.huffman(byte)
    writer.huffman(256)
    writer.pad_to_byte()

    out = writer.out
    out += struct.pack(">I", zlib.adler32(data) & _U32)
    return bytes(out)


def crc32(data: bytes) -> int:
    """Return the CRC-32 checksum used by PNG chunks."""
    return zlib.crc32(bytes(data)) & _U32


def _paeth(a: int, b: int, c: int) -> int:
    p = a + b - c
    pa, pb, pc = abs(p - a), abs(p - b), abs(p - c)
    if pa <= pb and pa <= pc:
        return a & 0xFF
    if pb <= pc:
        return b & 0xFF
    return c & 0xFF


def _filter_row(kind: int, row: bytes, up: bytes, bpp: int) -> bytes:
    out = bytearray(len(row))
    for i, value in enumerate(row):
        left = row[i - bpp] if i >= bpp else None
        if kind == 0:
            result = value
        elif kind == 1:
            result = value if left is None else value - left
        elif kind == 2:
            result = value - up[i]
        elif kind == 3:
            result = value - (up[i] >> 1) if left is None else value - ((left + up[i]) >> 1)
        elif kind == 4:
            if left is None:
                result = value - _paeth(0, up[i], 0)
            else:
                result = value - _paeth(left, up[i], up[i - bpp])
        elif kind == 5:
            result = value if left is None else value - (left >> 1)
        else:
            result = value if left is None else value - _paeth(left, 0, 0)
        out[i] = result & 0xFF
    return bytes(out)


def _cost(line: bytes) -> int:
    return sum(b if b < 128 else 256 - b for b in line)


def _chunk(tag: bytes, payload: bytes) -> bytes:
    return struct.pack(">I", len(payload)) + tag + payload + struct.pack(">I", crc32(tag + payload))


def encode_png(
    width: int, height: int, components: int, data: bytes, stride: int = 0
) -> bytes:
    """Encode 8-bit pixels (1=Y, 2=YA, 3=RGB, 4=RGBA) as a PNG image.

    ``stride`` is the distance in bytes between rows; 0 means tightly packed.
    """
    if width < 0 or height < 0:
        raise ValueError(f"invalid image size {width}x{height}")
    if components not in _COLOR_TYPES:
        raise ValueError(f"components must be between 1 and 4, got {components}")
    data = bytes(data)
    row_bytes = width * components
    if stride == 0:
        stride = row_bytes
    if stride < row_bytes:
        raise ValueError(f"stride {stride} is shorter than a row of {row_bytes} bytes")
    needed = stride * (height - 1) + row_bytes if height else 0
    if len(data) < needed:
        raise ValueError(f"image data holds {len(data)} bytes, {needed} needed")

    filtered = bytearray()
    previous = b""
    for j in range(height):
        row = data[stride * j:stride * j + row_bytes]
        strategies = _ROW_FILTERS if j else _FIRST_ROW_FILTERS
        candidates = [_filter_row(kind, row, previous, components) for kind in strategies]
        best = min(range(len(candidates)), key=lambda k: _cost(candidates[k]))
        filtered.append(best)
        filtered += candidates[best]
        previous = row

    compressed = zlib_compress(bytes(filtered), 8)
    header = struct.pack(">IIBBBBB", width, height, 8, _COLOR_TYPES[components], 0, 0, 0)
    return (
        _SIGNATURE
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", compressed)
        + _chunk(b"IEND", b"")
    )


def write_png(
    path: str | Path, width: int, height: int, components: int, data: bytes, stride: int = 0
) -> None:
    """Write a PNG image to ``path``."""
    Path(path).write_bytes(encode_png(width, height, components, data, stride))