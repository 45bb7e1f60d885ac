"""
Exceptions raised by the Viral Sweeper core.
"""


class ConfigurationError(ValueError):
    """Board constants cannot produce a playable game."""


class OutOfBoundsError(IndexError):
    """A coordinate lies outside the grid."""

    def __init__(self, row: int, col: int, size: int) -> None:
        super().__init__(
            f"Position ({row}, {col}) is outside the {size}x{size} grid"
        )
        self.row = row
        self.col = col
        self.size = size
