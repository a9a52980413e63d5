from __future__ import annotations

import logging
from typing import Dict, Tuple

from bytehuff.errors import FormatError
from bytehuff.huffman import Code, HuffmanNode

logger = logging.getLogger(__name__)


class BitWriter:
    """
    Packs codes MSB-first into a growing byte buffer
    finish() zero-pads the last partial byte and reports how many bits were added
    """

    def __init__(self):
        self.out = bytearray()
        self.acc = 0
        self.acc_bits = 0
        self.bits_written = 0

    def write(self, code: Code) -> None:
        self.acc = (self.acc << code.length) | code.bits
        self.acc_bits += code.length
        self.bits_written += code.length
        while self.acc_bits >= 8:
            self.acc_bits -= 8
            self.out.append((self.acc >> self.acc_bits) & 0xFF)
        self.acc &= (1 << self.acc_bits) - 1

    def finish(self) -> Tuple[bytes, int]:
        pad_bits = 0
        if self.acc_bits != 0:
            pad_bits = 8 - self.acc_bits
            self.out.append((self.acc << pad_bits) & 0xFF)
            self.acc = 0
            self.acc_bits = 0
        return bytes(self.out), pad_bits


def pack_codes(data: bytes, code_table: Dict[int, Code]) -> Tuple[bytes, int]:
    """
    Converts data into packed bytes using code_table
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    writer = BitWriter()
    for b in data:
        writer.write(code_table[b])
    packed, pad_bits = writer.finish()
    logger.debug("packed %d symbols into %d bits (%d bytes, %d pad bits)",
                 len(data), writer.bits_written, len(packed), pad_bits)
    return packed, pad_bits


def decode_bits(packed: bytes, pad_bits: int, root: HuffmanNode, count: int) -> bytes:
    """
    Decode exactly `count` symbols by walking the tree
    Running out of bits, leftover data bits, a missing branch or
    non-zero padding all raise FormatError
    """
    total_bits = len(packed) * 8 - pad_bits
    decoded = bytearray()
    node = root
    bit_index = 0

    for byte in packed:
        for i in range(7, -1, -1):
            if bit_index >= total_bits:
                break
            if len(decoded) == count:
                raise FormatError(f"{total_bits - bit_index} data bits left after {count} symbols")
            bit = (byte >> i) & 1
            node = node.right if bit == 1 else node.left
            if node is None:
                raise FormatError(f"bit {bit_index} does not follow any code")

            # Leaf
            if node.symbol is not None:
                decoded.append(node.symbol)
                node = root
            bit_index += 1

    if len(decoded) != count:
        raise FormatError(f"bitstream ended after {len(decoded)} of {count} symbols")
    if packed and pad_bits and packed[-1] & ((1 << pad_bits) - 1):
        raise FormatError("padding bits are not zero")
    return bytes(decoded)
