"""
Reveal engine for Viral Sweeper.

The game session is the only mutator of a board once play starts. Each
click seeds viruses (first click only), reveals or detonates the clicked
cell, cascades through safe regions and checks for a terminal event.
"""
import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

import numpy as np

from .board import Board, BoardConfig, DEFAULT
from .cell import Cell
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class TerminalEvent(Enum):
    """Outcome signalled to the presentation layer after a click."""

    NONE = auto()
    DEFEAT = auto()
    VICTORY = auto()


@dataclass(frozen=True)
class Snapshot:
    """
    Read-only view of a session after a click.

    Attributes:
        cells: 2D int8 array (-1 hidden, 0-8 revealed count, 9 detonated).
        event: Terminal event, NONE while play continues.
        clicks: Clicks processed so far.
    """

    cells: np.ndarray
    event: TerminalEvent
    clicks: int

    @property
    def is_terminal(self) -> bool:
        """Check if the click ended the game."""
        return self.event != TerminalEvent.NONE


# ============================================================================
# Cascade Reveal
# ============================================================================

def cascade_reveal(board: Board, row: int, col: int) -> int:
    """
    Reveal a safe cell and flood through its virus-free surroundings.

    A cell with infected neighbors shows its count and stops the flood; a
    cell with none also reveals every hidden safe neighbor. Cells leave the
    hidden-safe state at most once, so the worklist always drains.

    Args:
        board: Board to mutate.
        row: Row of the starting cell.
        col: Column of the starting cell.

    Returns:
        Number of cells revealed.
    """
    revealed = 0
    pending = [(row, col)]
    while pending:
        current_row, current_col = pending.pop()
        if not board.get(current_row, current_col).is_hidden_safe:
            continue

        count = board.count_virus_neighbors(current_row, current_col)
        board.set(current_row, current_col, Cell.revealed(count))
        revealed += 1

        if count == 0:
            pending.extend(
                (neighbor_row, neighbor_col)
                for neighbor_row, neighbor_col in board.neighbors(current_row, current_col)
                if board.get(neighbor_row, neighbor_col).is_hidden_safe
            )
    return revealed


# ============================================================================
# Game Session
# ============================================================================

class GameSession:
    """
    One game of Viral Sweeper.

    Owns the board and the click counter. Every click runs to completion
    under the session lock, so no reader sees a half-cascaded board.
    """

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        rng: Optional[np.random.Generator] = None,
        board: Optional[Board] = None,
    ) -> None:
        """
        Start a new session.

        Args:
            config: Board configuration (default: 16x16 with 30 viruses).
            rng: Random generator used for seeding.
            board: Prepared board to play on instead of a fresh one. A
                board that is already seeded skips first-click seeding.

        Raises:
            ConfigurationError: If the virus count cannot be seeded around
                every possible first click.
        """
        if board is None:
            config = config or DEFAULT
            if rng is None:
                board = Board(config)
            else:
                board = Board(config, rng=rng)
        elif config is not None and config != board.config:
            raise ConfigurationError("Board does not match configuration")

        if not board.viruses_placed:
            config = board.config
            if config.num_viruses > config.max_seedable_viruses:
                raise ConfigurationError(
                    f"Too many viruses for a {config.size}x{config.size} grid "
                    f"(max {config.max_seedable_viruses})"
                )

        self.board = board
        self._clicks = 0
        self._event = TerminalEvent.NONE
        self._lock = threading.Lock()

    # ========================================================================
    # Player Actions
    # ========================================================================

    def on_click(self, row: int, col: int) -> Snapshot:
        """
        Process one player click.

        Args:
            row: Row index clicked.
            col: Column index clicked.

        Returns:
            Snapshot of the settled board and any terminal event.

        Raises:
            OutOfBoundsError: If the position is off the board.
        """
        with self._lock:
            self.board.check_position(row, col)
            if self._event != TerminalEvent.NONE:
                logger.debug(
                    "Ignoring click at (%d, %d) after %s", row, col, self._event.name
                )
                return self._snapshot()

            self._clicks += 1
            if self._clicks == 1 and not self.board.viruses_placed:
                self.board.seed_viruses(row, col)

            cell = self.board.get(row, col)
            if cell.is_hidden_virus:
                self.board.set(row, col, Cell.detonated())
                self._event = TerminalEvent.DEFEAT
                logger.info("Virus detonated at (%d, %d)", row, col)
            elif cell.is_hidden:
                revealed = cascade_reveal(self.board, row, col)
                logger.debug("Click at (%d, %d) revealed %d cells", row, col, revealed)
            else:
                logger.debug("Click at (%d, %d) on a revealed cell", row, col)

            if (
                self._event == TerminalEvent.NONE
                and self.board.count_hidden() == self.board.config.num_viruses
            ):
                self._event = TerminalEvent.VICTORY
                logger.info("All safe cells revealed after %d clicks", self._clicks)

            return self._snapshot()

    # ========================================================================
    # State Accessors
    # ========================================================================

    def snapshot(self) -> Snapshot:
        """Get the current read-only view."""
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> Snapshot:
        cells = self.board.get_observation()
        cells.flags.writeable = False
        return Snapshot(cells, self._event, self._clicks)

    @property
    def clicks(self) -> int:
        """Clicks processed so far."""
        return self._clicks

    @property
    def event(self) -> TerminalEvent:
        """Terminal event reached, if any."""
        return self._event

    @property
    def is_over(self) -> bool:
        """Check if the game has ended."""
        return self._event != TerminalEvent.NONE
