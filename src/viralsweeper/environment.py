"""
Gymnasium environment wrapper for Viral Sweeper.

Drives a fresh game session per episode and renders its snapshots as
text, so programs and terminals can play without a GUI.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import BoardConfig, DEFAULT
from .cell import DETONATED_OBSERVATION, HIDDEN_OBSERVATION
from .engine import GameSession, Snapshot, TerminalEvent


# ============================================================================
# Rendering
# ============================================================================

RESET = "\033[0m"

# Conventional colours per infected neighbor count
NUMBER_COLORS = {
    1: "\033[34m",        # blue
    2: "\033[32m",        # green
    3: "\033[31m",        # red
    4: "\033[35m",        # purple
    5: "\033[38;5;88m",   # maroon
    6: "\033[38;5;44m",   # turquoise
    7: "\033[30m",        # black
    8: "\033[90m",        # gray
}
DETONATED_COLOR = "\033[1;32m"


def render_cells(cells: np.ndarray, color: bool = True) -> str:
    """
    Render an observation array as text.

    Hidden cells are '.', detonated cells '*', empty cells blank and
    numbered cells show their count.

    Args:
        cells: Observation from a snapshot.
        color: Wrap numbers and detonations in ANSI colour codes.

    Returns:
        One line per row, cells separated by spaces.
    """
    lines = []
    for row in cells:
        symbols = []
        for val in row:
            val = int(val)
            if val == HIDDEN_OBSERVATION:
                symbols.append(".")
            elif val == DETONATED_OBSERVATION:
                symbols.append(f"{DETONATED_COLOR}*{RESET}" if color else "*")
            elif val == 0:
                symbols.append(" ")
            elif color:
                symbols.append(f"{NUMBER_COLORS[val]}{val}{RESET}")
            else:
                symbols.append(str(val))
        lines.append(" ".join(symbols))
    return "\n".join(lines)


# ============================================================================
# Viral Sweeper Environment
# ============================================================================

class ViralSweeperEnv(gym.Env):
    """
    Gymnasium environment for Viral Sweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - 0-8 = revealed cell with infected neighbor count
        - 9 = detonated cell

    Actions:
        Discrete action space of size size * size.
        Action i corresponds to cell at (i // size, i % size).

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for detonating a virus
        - -0.1 for clicking an already revealed cell
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
        color: bool = True,
    ) -> None:
        """
        Initialize the Viral Sweeper environment.

        Args:
            config: Board configuration (default: 16x16 with 30 viruses).
            render_mode: How to render the environment.
            color: Use ANSI colours when rendering.
        """
        super().__init__()

        self.config = config or DEFAULT
        self.render_mode = render_mode
        self.color = color
        self.session = GameSession(self.config)
        self._snapshot = self.session.snapshot()

        self.observation_space = spaces.Box(
            low=HIDDEN_OBSERVATION,
            high=DETONATED_OBSERVATION,
            shape=(self.config.size, self.config.size),
            dtype=np.int8,
        )

        # One action per cell
        self.action_space = spaces.Discrete(self.config.total_cells)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game.

        Args:
            seed: Random seed for reproducible virus layouts.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.session = GameSession(self.config, rng=self.np_random)
        self._snapshot = self.session.snapshot()

        return self._snapshot.cells, self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Click one cell.

        Args:
            action: Cell index to click (row * size + col).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        row, col = self._action_to_position(int(action))
        was_hidden = self.session.board.get(row, col).is_hidden
        was_over = self.session.is_over

        self._snapshot = self.session.on_click(row, col)
        if was_over:
            reward = 0.0
        else:
            reward = self._calculate_reward(was_hidden, self._snapshot)

        terminated = self._snapshot.is_terminal
        truncated = False

        if self.render_mode == "human":
            self.render()

        return self._snapshot.cells, reward, terminated, truncated, self._get_info()

    def _action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (row, col) position."""
        return divmod(action, self.config.size)

    def _calculate_reward(self, was_hidden: bool, snapshot: Snapshot) -> float:
        """Score a click from its outcome."""
        if not was_hidden:
            return -0.1
        if snapshot.event == TerminalEvent.VICTORY:
            return 10.0
        if snapshot.event == TerminalEvent.DEFEAT:
            return -10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        cells = self._snapshot.cells
        hidden = int(np.count_nonzero(cells == HIDDEN_OBSERVATION))
        revealed = int(np.count_nonzero(
            (cells >= 0) & (cells < DETONATED_OBSERVATION)
        ))
        return {
            "clicks": self._snapshot.clicks,
            "revealed": revealed,
            "total_safe": self.config.safe_cells,
            "event": self._snapshot.event.name,
            "valid_actions": hidden,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        text = render_cells(self._snapshot.cells, color=self.color)
        if self.render_mode == "ansi":
            return text
        if self.render_mode == "human":
            print(text)
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of clickable cells.

        Returns:
            Boolean array where True = cell still hidden.
        """
        return (self._snapshot.cells == HIDDEN_OBSERVATION).reshape(-1)
