"""
Pytest configuration and shared fixtures.
"""
import numpy as np
import pytest

from viralsweeper import Board, BoardConfig, Cell, GameSession


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 16x16 board with 30 viruses."""
    return Board(rng=np.random.default_rng(7))


@pytest.fixture
def small_board() -> Board:
    """Create a small 5x5 board with 3 viruses for testing."""
    return Board(BoardConfig(5, 3), rng=np.random.default_rng(11))


@pytest.fixture
def clear_board() -> Board:
    """Create a board with no viruses for cascade testing."""
    return Board(BoardConfig(5, 0))


@pytest.fixture
def walled_board() -> Board:
    """
    Seeded 6x6 board split in half by an infected column.

    Column 3 holds all six viruses. Columns 0-1 and 5 border no virus,
    columns 2 and 4 border two (top and bottom rows) or three.
    """
    return Board.from_layout(["...*.."] * 6)


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def default_session() -> GameSession:
    """Create a 16x16 session with 30 viruses and a fixed seed."""
    return GameSession(rng=np.random.default_rng(2024))


@pytest.fixture
def walled_session(walled_board: Board) -> GameSession:
    """Create a session over the walled board."""
    return GameSession(board=walled_board)


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden safe cell."""
    return Cell.hidden()


@pytest.fixture
def virus_cell() -> Cell:
    """Create a hidden infected cell."""
    return Cell.hidden(True)
