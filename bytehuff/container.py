"""
Container layout (all integers big-endian, no text delimiters):

    magic            2 bytes   b"HZ"
    version          1 byte    FORMAT_VERSION
    symbol count     1 byte    0..MAX_SYMBOLS
    table            2 bytes per symbol: symbol (u8), code length (u8),
                     ascending symbol order
    original length  8 bytes   u64, number of bytes to decode
    padding          1 byte    0..7 zero bits appended to the last byte
    bitstream        rest

Only canonical code lengths are stored; the decoder derives the codes
with huffman.canonical_codes.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Dict, Tuple

from bytehuff.errors import CapacityExceeded, FormatError
from bytehuff.huffman import MAX_SYMBOLS

logger = logging.getLogger(__name__)

MAGIC = b"HZ"
FORMAT_VERSION = 1

_PREAMBLE = struct.Struct(">2sBB")
_ENTRY = struct.Struct(">BB")
_TRAILER = struct.Struct(">QB")


@dataclass
class Header:
    lengths: Dict[int, int] = field(default_factory=dict) # symbol -> code length
    original_length: int = 0
    pad_bits: int = 0

    @property
    def size(self) -> int:
        return _PREAMBLE.size + _ENTRY.size * len(self.lengths) + _TRAILER.size


def validate_lengths(lengths: Dict[int, int]) -> None:
    """
    Code lengths must describe a complete prefix code (Kraft sum == 1),
    except for a lone symbol, which always has length 1
    """
    if not lengths:
        return
    if any(length == 0 for length in lengths.values()):
        raise FormatError("code length of 0 in symbol table")
    if len(lengths) == 1:
        (length,) = lengths.values()
        if length != 1:
            raise FormatError(f"single-symbol table must use a 1-bit code, got {length}")
        return
    longest = max(lengths.values())
    kraft = sum(1 << (longest - length) for length in lengths.values())
    if kraft != 1 << longest:
        raise FormatError("code lengths do not form a complete prefix code")


def write_container(header: Header, packed: bytes) -> bytes:
    if len(header.lengths) > MAX_SYMBOLS:
        raise CapacityExceeded(len(header.lengths), MAX_SYMBOLS)
    out = bytearray(_PREAMBLE.pack(MAGIC, FORMAT_VERSION, len(header.lengths)))
    for symbol in sorted(header.lengths):
        out += _ENTRY.pack(symbol, header.lengths[symbol])
    out += _TRAILER.pack(header.original_length, header.pad_bits)
    out += packed
    logger.debug("container: %d header bytes, %d payload bytes", header.size, len(packed))
    return bytes(out)


def read_container(blob: bytes) -> Tuple[Header, memoryview]:
    view = memoryview(blob)
    if len(view) < _PREAMBLE.size:
        raise FormatError(f"blob too short for container header ({len(view)} bytes)")
    magic, version, count = _PREAMBLE.unpack_from(view, 0)
    if magic != MAGIC:
        raise FormatError(f"bad magic {magic!r}")
    if version != FORMAT_VERSION:
        raise FormatError(f"unsupported container version {version}")
    if count > MAX_SYMBOLS:
        raise FormatError(f"symbol table declares {count} entries, limit is {MAX_SYMBOLS}")

    offset = _PREAMBLE.size
    if len(view) < offset + _ENTRY.size * count + _TRAILER.size:
        raise FormatError("blob truncated inside the header")

    lengths: Dict[int, int] = {}
    for _ in range(count):
        symbol, length = _ENTRY.unpack_from(view, offset)
        offset += _ENTRY.size
        if symbol in lengths:
            raise FormatError(f"duplicate symbol {symbol} in symbol table")
        lengths[symbol] = length
    validate_lengths(lengths)

    original_length, pad_bits = _TRAILER.unpack_from(view, offset)
    offset += _TRAILER.size
    payload = view[offset:]

    if pad_bits > 7:
        raise FormatError(f"padding of {pad_bits} bits is more than a byte")
    if pad_bits and not payload:
        raise FormatError("padding declared for an empty bitstream")
    if not lengths and (original_length or payload):
        raise FormatError("empty symbol table with non-empty content")
    if lengths and not original_length:
        raise FormatError("symbol table present but original length is 0")

    header = Header(lengths=lengths, original_length=original_length, pad_bits=pad_bits)
    logger.debug("read header: %d symbols, original length %d, %d pad bits",
                 len(lengths), original_length, pad_bits)
    return header, payload
