"""Static Huffman compressor for byte buffers."""

from bytehuff.codec import compress, decompress
from bytehuff.errors import CapacityExceeded, FormatError, HuffmanError
from bytehuff.huffman import MAX_SYMBOLS

__all__ = [
    "compress",
    "decompress",
    "CapacityExceeded",
    "FormatError",
    "HuffmanError",
    "MAX_SYMBOLS",
]

__version__ = "1.0.0"
