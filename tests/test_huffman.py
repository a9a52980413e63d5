"""Frequency analysis, tree construction and code table tests."""

from __future__ import annotations

import random

import pytest

from bytehuff.errors import CapacityExceeded, FormatError
from bytehuff.huffman import (
    MAX_SYMBOLS,
    Code,
    build_code_table,
    build_huffman_tree,
    canonical_codes,
    code_lengths,
    frequency_table,
    generate_huffman_codes,
    tree_from_codes,
)


def _assert_prefix_free(table) -> None:
    words = [str(code) for code in table.values()]
    for i, a in enumerate(words):
        for j, b in enumerate(words):
            if i != j:
                assert not b.startswith(a), f"{a} is a prefix of {b}"


class TestFrequencyTable:
    def test_empty(self) -> None:
        assert frequency_table(b"") == {}

    def test_counts(self) -> None:
        assert frequency_table(b"aaaabbbcc") == {ord("a"): 4, ord("b"): 3, ord("c"): 2}

    def test_accepts_bytearray_and_memoryview(self) -> None:
        data = b"\x00\x00\xff"
        expected = {0: 2, 255: 1}
        assert frequency_table(bytearray(data)) == expected
        assert frequency_table(memoryview(data)) == expected


class TestTreeBuilder:
    def test_empty_table_has_no_tree(self) -> None:
        assert build_huffman_tree({}) is None

    def test_single_symbol_is_a_leaf(self) -> None:
        root = build_huffman_tree({65: 10})
        assert root.is_leaf()
        assert root.symbol == 65
        assert root.frequency == 10

    def test_internal_frequency_is_sum_of_children(self) -> None:
        root = build_huffman_tree({1: 5, 2: 9, 3: 12, 4: 13, 5: 16, 6: 45})
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_leaf():
                continue
            assert node.left is not None and node.right is not None
            assert node.frequency == node.left.frequency + node.right.frequency
            stack += [node.left, node.right]
        assert root.frequency == 100

    def test_first_popped_is_left(self) -> None:
        root = build_huffman_tree({ord("a"): 4, ord("b"): 3, ord("c"): 2})
        assert root.left.symbol == ord("a")
        assert root.right.left.symbol == ord("c")
        assert root.right.right.symbol == ord("b")

    def test_equal_frequencies_prefer_lower_symbol(self) -> None:
        codes = generate_huffman_codes(build_huffman_tree({4: 1, 3: 1, 2: 1, 1: 1}))
        assert codes == {1: Code(0b00, 2), 2: Code(0b01, 2), 3: Code(0b10, 2), 4: Code(0b11, 2)}

    def test_equal_frequencies_prefer_earlier_node(self) -> None:
        # the merged (10, 20) node ties with leaf 30 but was created later
        codes = generate_huffman_codes(build_huffman_tree({10: 1, 20: 1, 30: 2}))
        assert codes == {30: Code(0, 1), 10: Code(0b10, 2), 20: Code(0b11, 2)}

    def test_insertion_order_does_not_matter(self) -> None:
        ft = {7: 3, 1: 3, 200: 1, 9: 1, 50: 2}
        reordered = dict(reversed(list(ft.items())))
        assert generate_huffman_codes(build_huffman_tree(ft)) == generate_huffman_codes(build_huffman_tree(reordered))


class TestCodeTable:
    def test_three_symbol_lengths(self) -> None:
        lengths = code_lengths(build_huffman_tree(frequency_table(b"aaaabbbcc")))
        assert lengths == {ord("a"): 1, ord("b"): 2, ord("c"): 2}

    def test_canonical_assignment(self) -> None:
        table = build_code_table(frequency_table(b"aaaabbbcc"))
        assert table == {ord("a"): Code(0b0, 1), ord("b"): Code(0b10, 2), ord("c"): Code(0b11, 2)}

    def test_canonical_orders_by_length_then_symbol(self) -> None:
        codes = canonical_codes({5: 3, 2: 2, 9: 3, 1: 2, 4: 2})
        assert [str(codes[s]) for s in (1, 2, 4, 5, 9)] == ["00", "01", "10", "110", "111"]

    def test_single_symbol_gets_one_bit(self) -> None:
        assert build_code_table({0: 1000}) == {0: Code(0, 1)}

    def test_empty(self) -> None:
        assert build_code_table({}) == {}
        assert generate_huffman_codes(None) == {}

    def test_walk_and_canonical_lengths_agree(self) -> None:
        ft = {i: (i % 7) + 1 for i in range(40)}
        root = build_huffman_tree(ft)
        walked = generate_huffman_codes(root)
        table = build_code_table(ft)
        assert {s: c.length for s, c in walked.items()} == {s: c.length for s, c in table.items()}

    @pytest.mark.parametrize("seed", range(10))
    def test_prefix_free(self, seed: int) -> None:
        rng = random.Random(seed)
        symbols = rng.sample(range(256), rng.randint(2, MAX_SYMBOLS))
        ft = {s: rng.randint(1, 1000) for s in symbols}
        _assert_prefix_free(generate_huffman_codes(build_huffman_tree(ft)))
        _assert_prefix_free(build_code_table(ft))

    def test_deep_tree_lengths_fit_one_byte(self) -> None:
        # Fibonacci weights give the most skewed tree possible
        fib = [1, 1]
        while len(fib) < MAX_SYMBOLS:
            fib.append(fib[-1] + fib[-2])
        table = build_code_table({i: f for i, f in enumerate(fib)})
        longest = max(c.length for c in table.values())
        assert longest == MAX_SYMBOLS - 1
        assert longest <= 255
        _assert_prefix_free(table)


class TestCapacity:
    def test_exactly_128_symbols(self) -> None:
        table = build_code_table(frequency_table(bytes(range(MAX_SYMBOLS))))
        assert len(table) == MAX_SYMBOLS
        assert all(c.length == 7 for c in table.values())

    def test_129_symbols_rejected(self) -> None:
        with pytest.raises(CapacityExceeded) as excinfo:
            build_code_table(frequency_table(bytes(range(MAX_SYMBOLS + 1))))
        assert excinfo.value.distinct == 129
        assert excinfo.value.limit == 128


class TestTreeFromCodes:
    def test_rebuilds_leaves(self) -> None:
        root = tree_from_codes(canonical_codes({1: 1, 2: 2, 3: 2}))
        assert root.left.symbol == 1
        assert root.right.left.symbol == 2
        assert root.right.right.symbol == 3

    def test_single_code_has_left_leaf_only(self) -> None:
        root = tree_from_codes({42: Code(0, 1)})
        assert root.left.symbol == 42
        assert root.right is None

    def test_empty(self) -> None:
        assert tree_from_codes({}) is None

    def test_duplicate_code(self) -> None:
        with pytest.raises(FormatError):
            tree_from_codes({1: Code(0b10, 2), 2: Code(0b10, 2)})

    def test_code_extends_a_leaf(self) -> None:
        with pytest.raises(FormatError):
            tree_from_codes({1: Code(0b1, 1), 2: Code(0b10, 2)})

    def test_code_ends_on_internal_node(self) -> None:
        with pytest.raises(FormatError):
            tree_from_codes({1: Code(0b10, 2), 2: Code(0b1, 1)})
