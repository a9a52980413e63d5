from __future__ import annotations

import logging

from bytehuff.bitstream import decode_bits, pack_codes
from bytehuff.container import Header, read_container, write_container
from bytehuff.huffman import build_code_table, canonical_codes, frequency_table, tree_from_codes

logger = logging.getLogger(__name__)


def compress(data: bytes) -> bytes:
    """
    Huffman-compress `data` into a self-describing container
    Raises CapacityExceeded for more than MAX_SYMBOLS distinct byte values
    """
    ft = frequency_table(data)
    code_table = build_code_table(ft)
    packed, pad_bits = pack_codes(data, code_table)
    header = Header(
        lengths={symbol: code.length for symbol, code in code_table.items()},
        original_length=len(data),
        pad_bits=pad_bits,
    )
    blob = write_container(header, packed)
    logger.debug("compressed %d bytes to %d", len(data), len(blob))
    return blob


def decompress(blob: bytes) -> bytes:
    """Inverse of compress(). Raises FormatError for a malformed blob"""
    header, payload = read_container(blob)
    if not header.lengths:
        return b""
    root = tree_from_codes(canonical_codes(header.lengths))
    data = decode_bits(payload, header.pad_bits, root, header.original_length)
    logger.debug("decompressed %d bytes to %d", len(blob), len(data))
    return data
