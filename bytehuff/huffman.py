from __future__ import annotations

import heapq
import logging
from collections import Counter
from typing import Dict, List, NamedTuple, Optional, Tuple

from bytehuff.errors import CapacityExceeded, FormatError

logger = logging.getLogger(__name__)

MAX_SYMBOLS = 128 # one table entry per distinct byte, see container.py


class Code(NamedTuple):
    bits: int    # pattern, read MSB-first
    length: int

    def __str__(self) -> str:
        return format(self.bits, f"0{self.length}b")


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency, order=0):
        self.symbol = symbol    # byte or None
        self.frequency = frequency
        self.order = order      # creation sequence, breaks frequency ties
        self.left = None
        self.right = None

    def is_leaf(self) -> bool:
        return self.symbol is not None

    def __lt__(self, other):
        # equal frequencies: the node created earlier is popped first
        return (self.frequency, self.order) < (other.frequency, other.order)


def frequency_table(data: bytes) -> Dict[int, int]:
    return dict(Counter(data))


def build_huffman_tree(frequency_table: Dict[int, int]) -> Optional[HuffmanNode]: # frequency_table: dict of symbol -> frequency
    # leaves are numbered in ascending symbol order so the tree does not depend on dict order
    priority_queue = [
        HuffmanNode(symbol, frequency_table[symbol], order)
        for order, symbol in enumerate(sorted(frequency_table))
    ]
    if not priority_queue:
        return None
    heapq.heapify(priority_queue)
    next_order = len(priority_queue)

    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.frequency + right.frequency, next_order)
        next_order += 1
        merged_node.left = left
        merged_node.right = right
        heapq.heappush(priority_queue, merged_node)

    return priority_queue[0] # root of the tree


def generate_huffman_codes(root: Optional[HuffmanNode]) -> Dict[int, Code]:
    """
    Walk the tree, 0 for left and 1 for right, and return symbol -> Code
    A tree made of one leaf gets the 1-bit code 0
    """
    codes: Dict[int, Code] = {}
    if root is None:
        return codes
    if root.is_leaf():
        codes[root.symbol] = Code(0, 1)
        return codes

    # explicit stack, a skewed tree over 128 symbols is up to 127 levels deep
    stack: List[Tuple[HuffmanNode, int, int]] = [(root, 0, 0)]
    while stack:
        node, bits, depth = stack.pop()
        if node.is_leaf():
            codes[node.symbol] = Code(bits, depth)
            continue
        stack.append((node.right, (bits << 1) | 1, depth + 1))
        stack.append((node.left, bits << 1, depth + 1))
    return codes


def code_lengths(root: Optional[HuffmanNode]) -> Dict[int, int]:
    return {symbol: code.length for symbol, code in generate_huffman_codes(root).items()}


def canonical_codes(lengths: Dict[int, int]) -> Dict[int, Code]:
    """
    Canonical Huffman assignment: sort by (length, symbol) and hand out
    consecutive codes, shifting left whenever the length grows
    """
    codes: Dict[int, Code] = {}
    code = 0
    prev_len = 0
    for symbol, length in sorted(lengths.items(), key=lambda kv: (kv[1], kv[0])):
        code <<= (length - prev_len)
        codes[symbol] = Code(code, length)
        code += 1
        prev_len = length
    return codes


def check_capacity(frequency_table: Dict[int, int]) -> None:
    if len(frequency_table) > MAX_SYMBOLS:
        raise CapacityExceeded(len(frequency_table), MAX_SYMBOLS)


def build_code_table(frequency_table: Dict[int, int]) -> Dict[int, Code]:
    check_capacity(frequency_table)
    root = build_huffman_tree(frequency_table)
    table = canonical_codes(code_lengths(root))
    logger.debug("built code table: %d symbols, longest code %d bits",
                 len(table), max((c.length for c in table.values()), default=0))
    return table


def tree_from_codes(codes: Dict[int, Code]) -> Optional[HuffmanNode]:
    """
    Rebuild a decoding tree from a code table. Frequencies are not known
    on this side, so every node carries 0. Colliding codes raise FormatError
    """
    if not codes:
        return None
    root = HuffmanNode(None, 0)
    for symbol, code in codes.items():
        node = root
        for i in range(code.length - 1, -1, -1):
            if node.is_leaf():
                raise FormatError(f"code for symbol {symbol} extends the code of symbol {node.symbol}")
            if (code.bits >> i) & 1:
                if node.right is None:
                    node.right = HuffmanNode(symbol if i == 0 else None, 0)
                elif i == 0:
                    raise FormatError(f"code for symbol {symbol} collides with another code")
                node = node.right
            else:
                if node.left is None:
                    node.left = HuffmanNode(symbol if i == 0 else None, 0)
                elif i == 0:
                    raise FormatError(f"code for symbol {symbol} collides with another code")
                node = node.left
    return root
