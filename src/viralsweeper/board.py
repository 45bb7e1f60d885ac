"""
Board module for Viral Sweeper.

Implements the square grid of cells with neighbor queries, bounds-checked
cell access and the one-time virus seeding that follows the first click.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Set, Tuple

import numpy as np

from .cell import Cell
from .errors import ConfigurationError, OutOfBoundsError

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

GRID_SIZE = 16
VIRUSES = 30

VIRUS_SYMBOL = "*"
SAFE_SYMBOL = "."


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Viral Sweeper board.

    Attributes:
        size: Number of rows and columns.
        num_viruses: Total viruses to seed after the first click.
    """

    size: int = GRID_SIZE
    num_viruses: int = VIRUSES

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.size < 1:
            raise ConfigurationError("Board size must be positive")
        if self.num_viruses < 0:
            raise ConfigurationError("Number of viruses cannot be negative")
        max_viruses = self.size * self.size - 1
        if self.num_viruses > max_viruses:
            raise ConfigurationError(f"Too many viruses (max {max_viruses})")

    @property
    def total_cells(self) -> int:
        return self.size * self.size

    @property
    def safe_cells(self) -> int:
        return self.total_cells - self.num_viruses

    @property
    def max_seedable_viruses(self) -> int:
        """Viruses that fit wherever the first click lands.

        An interior click keeps itself and its 8 neighbors clear, which is
        the largest exclusion zone a click can have.
        """
        span = min(self.size, 3)
        return self.total_cells - span * span


DEFAULT = BoardConfig(GRID_SIZE, VIRUSES)


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Viral Sweeper grid.

    Owns the cells and answers adjacency queries. It knows nothing about
    clicks or game outcome; the reveal engine drives it.
    """

    config: BoardConfig = field(default_factory=lambda: DEFAULT)
    rng: np.random.Generator = field(
        default_factory=np.random.default_rng, repr=False
    )
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _viruses_placed: bool = False

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self._init_grid()

    @classmethod
    def from_layout(cls, rows: Sequence[str]) -> "Board":
        """
        Build an already seeded board from text rows.

        Args:
            rows: Equal-length strings, '*' for a virus and '.' for a safe
                cell.

        Returns:
            Board whose virus count matches the layout.
        """
        size = len(rows)
        if any(len(row) != size for row in rows):
            raise ConfigurationError("Layout must be square")
        positions = []
        for row, line in enumerate(rows):
            for col, symbol in enumerate(line):
                if symbol == VIRUS_SYMBOL:
                    positions.append((row, col))
                elif symbol != SAFE_SYMBOL:
                    raise ConfigurationError(
                        f"Unknown layout symbol {symbol!r} at ({row}, {col})"
                    )

        board = cls(BoardConfig(size, len(positions)))
        for row, col in positions:
            board.set(row, col, Cell.hidden(True))
        board._viruses_placed = True
        return board

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create an all-hidden, virus-free grid."""
        self._grid = [
            [Cell.hidden(False) for _ in range(self.config.size)]
            for _ in range(self.config.size)
        ]
        self._viruses_placed = False

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def neighbors(self, row: int, col: int) -> Set[Position]:
        """
        Get positions adjacent to a cell.

        Edges are clipped, not wrapped: corners have 3 neighbors, edge
        cells 5 and interior cells 8.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            Set of (row, col) tuples, excluding the center.
        """
        last = self.config.size - 1
        return {
            (neighbor_row, neighbor_col)
            for neighbor_row in range(max(0, row - 1), min(row + 1, last) + 1)
            for neighbor_col in range(max(0, col - 1), min(col + 1, last) + 1)
            if (neighbor_row, neighbor_col) != (row, col)
        }

    def is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.config.size and 0 <= col < self.config.size

    def check_position(self, row: int, col: int) -> None:
        """Raise OutOfBoundsError unless position is on the board."""
        if not self.is_valid_position(row, col):
            raise OutOfBoundsError(row, col, self.config.size)

    def positions(self) -> Iterator[Position]:
        """Iterate over every position in row-major order."""
        for row in range(self.config.size):
            for col in range(self.config.size):
                yield row, col

    # ========================================================================
    # Cell Access (Mid-level)
    # ========================================================================

    def get(self, row: int, col: int) -> Cell:
        """Get the cell at a position."""
        self.check_position(row, col)
        return self._grid[row][col]

    def set(self, row: int, col: int, cell: Cell) -> None:
        """Replace the cell at a position."""
        self.check_position(row, col)
        self._grid[row][col] = cell

    def count_virus_neighbors(self, row: int, col: int) -> int:
        """Count hidden viruses adjacent to a position."""
        return sum(
            1
            for neighbor_row, neighbor_col in self.neighbors(row, col)
            if self._grid[neighbor_row][neighbor_col].is_hidden_virus
        )

    # ========================================================================
    # Virus Seeding (Mid-level)
    # ========================================================================

    def seed_viruses(self, exclude_row: int, exclude_col: int) -> None:
        """
        Place the configured number of viruses away from a position.

        The excluded position and its neighbors stay virus-free. Positions
        are drawn uniformly and rejected until enough placements succeed.

        Args:
            exclude_row: Row of the first click.
            exclude_col: Column of the first click.

        Raises:
            ConfigurationError: If viruses were already seeded, or there
                are fewer eligible cells than viruses.
        """
        self.check_position(exclude_row, exclude_col)
        if self._viruses_placed:
            raise ConfigurationError("Viruses have already been seeded")

        excluded = self.neighbors(exclude_row, exclude_col)
        excluded.add((exclude_row, exclude_col))
        eligible = sum(
            1
            for row, col in self.positions()
            if (row, col) not in excluded and self._grid[row][col].is_hidden_safe
        )
        num_viruses = self.config.num_viruses
        if num_viruses > eligible:
            raise ConfigurationError(
                f"Cannot seed {num_viruses} viruses into {eligible} eligible cells"
            )

        size = self.config.size
        placed = 0
        draws = 0
        while placed < num_viruses:
            row = int(self.rng.integers(size))
            col = int(self.rng.integers(size))
            draws += 1
            if (row, col) in excluded:
                continue
            if not self._grid[row][col].is_hidden_safe:
                continue
            self._grid[row][col] = Cell.hidden(True)
            placed += 1

        self._viruses_placed = True
        logger.debug(
            "Seeded %d viruses around (%d, %d) in %d draws",
            placed, exclude_row, exclude_col, draws,
        )

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def viruses_placed(self) -> bool:
        """Check if seeding has happened."""
        return self._viruses_placed

    def count_hidden(self) -> int:
        """Count cells not yet revealed, infected or not."""
        return sum(1 for row in self._grid for cell in row if cell.is_hidden)

    def count_viruses(self) -> int:
        """Count cells holding a virus, detonated included."""
        return sum(1 for row in self._grid for cell in row if cell.has_virus)

    def get_hidden_positions(self) -> List[Position]:
        """
        Get list of cells that can still be clicked.

        Returns:
            List of (row, col) positions still hidden.
        """
        return [
            (row, col)
            for row, col in self.positions()
            if self._grid[row][col].is_hidden
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            2D numpy array where:
                -1 = hidden
                0-8 = revealed with infected neighbor count
                9 = detonated
        """
        size = self.config.size
        obs = np.zeros((size, size), dtype=np.int8)
        for row, col in self.positions():
            obs[row, col] = self._grid[row][col].to_observation()
        return obs
