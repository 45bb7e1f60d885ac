"""
Viral Sweeper game module.

Provides the grid model, the click-driven reveal engine and a gymnasium
environment for driving games without a GUI.
"""
from .cell import Cell, CellState
from .board import Board, BoardConfig, DEFAULT, GRID_SIZE, VIRUSES
from .engine import GameSession, Snapshot, TerminalEvent, cascade_reveal
from .environment import ViralSweeperEnv, render_cells
from .errors import ConfigurationError, OutOfBoundsError

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "DEFAULT",
    "GRID_SIZE",
    "VIRUSES",
    "GameSession",
    "Snapshot",
    "TerminalEvent",
    "cascade_reveal",
    "ViralSweeperEnv",
    "render_cells",
    "ConfigurationError",
    "OutOfBoundsError",
]
