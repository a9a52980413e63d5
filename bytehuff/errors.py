class HuffmanError(ValueError):
    """Base class for every failure raised by the codec."""


class CapacityExceeded(HuffmanError):
    def __init__(self, distinct: int, limit: int):
        self.distinct = distinct
        self.limit = limit
        super().__init__(
            f"input has {distinct} distinct byte values, the container format addresses at most {limit}"
        )


class FormatError(HuffmanError):
    """Compressed blob is truncated, malformed or self-inconsistent."""
