"""
Cell module for Viral Sweeper.

A cell is an immutable value in one of three states: hidden (with or
without a virus), revealed (with its infected neighbor count) or
detonated. The board replaces cells instead of mutating them.
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    DETONATED = auto()


HIDDEN_OBSERVATION = -1
DETONATED_OBSERVATION = 9
MAX_NEIGHBORS = 8


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass(frozen=True)
class Cell:
    """
    Represents a single position on the Viral Sweeper grid.

    Attributes:
        state: Hidden, revealed or detonated.
        has_virus: Whether a virus occupies this position.
        neighbor_count: Infected neighbors (0-8), only set once revealed.
    """

    state: CellState = CellState.HIDDEN
    has_virus: bool = False
    neighbor_count: int = 0

    def __post_init__(self) -> None:
        """Reject combinations that no game can reach."""
        if self.state == CellState.REVEALED:
            if self.has_virus:
                raise ValueError("A revealed cell cannot hold a virus")
            if not 0 <= self.neighbor_count <= MAX_NEIGHBORS:
                raise ValueError(
                    f"Neighbor count must be 0-{MAX_NEIGHBORS}, "
                    f"got {self.neighbor_count}"
                )
        elif self.neighbor_count != 0:
            raise ValueError("Only revealed cells carry a neighbor count")
        if self.state == CellState.DETONATED and not self.has_virus:
            raise ValueError("A detonated cell must hold a virus")

    @classmethod
    def hidden(cls, has_virus: bool = False) -> "Cell":
        """Create a hidden cell."""
        return cls(CellState.HIDDEN, has_virus)

    @classmethod
    def revealed(cls, neighbor_count: int) -> "Cell":
        """Create a revealed safe cell."""
        return cls(CellState.REVEALED, False, neighbor_count)

    @classmethod
    def detonated(cls) -> "Cell":
        """Create the cell that ended the game."""
        return cls(CellState.DETONATED, True)

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_hidden_safe(self) -> bool:
        """Check if cell is hidden and virus-free."""
        return self.is_hidden and not self.has_virus

    @property
    def is_hidden_virus(self) -> bool:
        """Check if cell is hidden and infected."""
        return self.is_hidden and self.has_virus

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_detonated(self) -> bool:
        """Check if cell is detonated."""
        return self.state == CellState.DETONATED

    def to_observation(self) -> int:
        """
        Convert cell to the value exposed to renderers.

        Returns:
            -1: Hidden cell (infected or not)
            0-8: Revealed cell with infected neighbor count
            9: Detonated cell
        """
        if self.state == CellState.HIDDEN:
            return HIDDEN_OBSERVATION
        if self.state == CellState.DETONATED:
            return DETONATED_OBSERVATION
        return self.neighbor_count
