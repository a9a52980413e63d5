"""Shared pytest fixtures for bytehuff tests."""

from __future__ import annotations

import os
import random

# charts are rendered off-screen during tests
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest


@pytest.fixture()
def sample_text() -> bytes:
    """English-ish text, well under the symbol ceiling."""
    return b"the quick brown fox jumps over the lazy dog.\n" * 40


@pytest.fixture()
def skewed_data() -> bytes:
    """One dominant byte with a sprinkle of 63 others, including NUL."""
    rng = random.Random(7)
    out = bytearray()
    for _ in range(5000):
        out.append(0x41 if rng.random() < 0.85 else rng.randrange(0, 64))
    return bytes(out)


@pytest.fixture()
def full_alphabet() -> bytes:
    """Exactly 128 distinct byte values, the even ones from 0x00 to 0xfe."""
    rng = random.Random(11)
    symbols = list(range(0, 256, 2))
    data = symbols + [rng.choice(symbols) for _ in range(2000)]
    rng.shuffle(data)
    return bytes(data)
