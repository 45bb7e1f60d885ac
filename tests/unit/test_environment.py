"""
Unit tests for the gymnasium environment and text rendering.
"""
import numpy as np
import pytest
from viralsweeper import (
    BoardConfig,
    GameSession,
    TerminalEvent,
    ViralSweeperEnv,
    render_cells,
)


@pytest.fixture
def env() -> ViralSweeperEnv:
    """Create a default environment rendering plain text."""
    return ViralSweeperEnv(render_mode="ansi", color=False)


# ============================================================================
# Space Tests
# ============================================================================

class TestSpaces:
    """Test observation and action spaces."""

    def test_action_space_has_one_action_per_cell(
        self, env: ViralSweeperEnv
    ) -> None:
        """Action space covers the whole grid."""
        assert env.action_space.n == 256

    def test_reset_observation_in_space(self, env: ViralSweeperEnv) -> None:
        """Reset observation is all hidden and within the space."""
        obs, info = env.reset(seed=0)
        assert env.observation_space.contains(obs)
        assert np.all(obs == -1)
        assert info["clicks"] == 0
        assert info["event"] == "NONE"
        assert info["valid_actions"] == 256
        assert info["total_safe"] == 226


# ============================================================================
# Step Tests
# ============================================================================

class TestStep:
    """Test clicking through the environment."""

    def test_first_step_is_safe(self, env: ViralSweeperEnv) -> None:
        """First click reveals a cell and earns a positive reward."""
        env.reset(seed=1)
        obs, reward, terminated, truncated, info = env.step(8 * 16 + 8)
        assert obs[8, 8] == 0
        assert reward in (1.0, 10.0)
        assert truncated is False
        assert info["clicks"] == 1
        assert info["revealed"] >= 9

    def test_action_maps_to_row_and_col(self, env: ViralSweeperEnv) -> None:
        """Action i clicks (i // size, i % size)."""
        env.reset(seed=2)
        env.step(3 * 16 + 5)
        assert env.session.board.get(3, 5).is_revealed

    def test_repeated_click_is_penalised(self, env: ViralSweeperEnv) -> None:
        """Clicking a revealed cell costs a little."""
        env.reset(seed=3)
        env.step(0)
        _, reward, _, _, info = env.step(0)
        assert reward == pytest.approx(-0.1)
        assert info["clicks"] == 2

    def test_detonation_terminates(self, env: ViralSweeperEnv) -> None:
        """Clicking a virus ends the episode with a penalty."""
        env.reset(seed=4)
        env.step(8 * 16 + 8)
        board = env.session.board
        row, col = next(
            pos for pos in board.positions() if board.get(*pos).is_hidden_virus
        )
        obs, reward, terminated, _, info = env.step(row * 16 + col)
        assert terminated is True
        assert reward == -10.0
        assert obs[row, col] == 9
        assert info["event"] == TerminalEvent.DEFEAT.name

    def test_clearing_board_wins(self) -> None:
        """Clicking every safe cell ends the episode with a win."""
        env = ViralSweeperEnv(BoardConfig(6, 4))
        env.reset(seed=5)
        board = env.session.board
        env.step(0)

        terminated = env.session.is_over
        for row, col in list(board.positions()):
            if terminated:
                break
            if board.get(row, col).is_hidden_safe:
                _, _, terminated, _, _ = env.step(row * 6 + col)

        assert env.session.event == TerminalEvent.VICTORY
        assert terminated is True

    def test_reset_starts_fresh_session(self, env: ViralSweeperEnv) -> None:
        """Each episode gets a new session."""
        env.reset(seed=6)
        env.step(0)
        first_session = env.session
        obs, info = env.reset(seed=6)
        assert env.session is not first_session
        assert isinstance(env.session, GameSession)
        assert info["clicks"] == 0
        assert np.all(obs == -1)

    def test_same_seed_same_layout(self, env: ViralSweeperEnv) -> None:
        """Seeded resets reproduce the virus layout."""
        env.reset(seed=9)
        env.step(40)
        first = env.session.board.get_observation()
        layout = [env.session.board.get(*pos).has_virus
                  for pos in env.session.board.positions()]

        env.reset(seed=9)
        env.step(40)
        assert np.array_equal(env.session.board.get_observation(), first)
        assert layout == [env.session.board.get(*pos).has_virus
                          for pos in env.session.board.positions()]


# ============================================================================
# Action Mask Tests
# ============================================================================

class TestActionMask:
    """Test valid action masks."""

    def test_mask_marks_hidden_cells(self, env: ViralSweeperEnv) -> None:
        """Revealed cells are masked out."""
        env.reset(seed=7)
        assert env.get_action_mask().all()
        env.step(8 * 16 + 8)
        mask = env.get_action_mask()
        assert mask.shape == (256,)
        assert mask[8 * 16 + 8] == False  # noqa: E712
        assert mask.sum() == env.session.board.count_hidden()


# ============================================================================
# Rendering Tests
# ============================================================================

class TestRendering:
    """Test text rendering of snapshots."""

    def test_plain_render_symbols(self) -> None:
        """Hidden, empty, numbered and detonated cells render distinctly."""
        cells = np.array([[-1, 0], [3, 9]], dtype=np.int8)
        assert render_cells(cells, color=False) == ".  \n3 *"

    def test_color_render_uses_number_colors(self) -> None:
        """Numbers are wrapped in their conventional colour."""
        cells = np.array([[1, 2]], dtype=np.int8)
        text = render_cells(cells, color=True)
        assert "\033[34m1\033[0m" in text
        assert "\033[32m2\033[0m" in text

    def test_ansi_render_matches_snapshot(self, env: ViralSweeperEnv) -> None:
        """ANSI mode returns one line per row."""
        env.reset(seed=8)
        text = env.render()
        lines = text.split("\n")
        assert len(lines) == 16
        assert lines[0] == " ".join(["."] * 16)

    def test_human_render_prints(self, capsys: pytest.CaptureFixture) -> None:
        """Human mode prints the board."""
        env = ViralSweeperEnv(BoardConfig(4, 0), render_mode="human", color=False)
        env.reset(seed=0)
        assert env.render() is None
        assert ". . . ." in capsys.readouterr().out


# ============================================================================
# Finished Episode Tests
# ============================================================================

class TestFinishedEpisode:
    """Test steps taken after the game has ended."""

    def test_step_after_defeat_scores_nothing(
        self, env: ViralSweeperEnv
    ) -> None:
        """Clicks after a loss leave the board alone and earn no reward."""
        env.reset(seed=4)
        env.step(8 * 16 + 8)
        board = env.session.board
        viruses = [
            pos for pos in board.positions() if board.get(*pos).is_hidden_virus
        ]
        env.step(viruses[0][0] * 16 + viruses[0][1])

        obs, reward, terminated, _, info = env.step(
            viruses[1][0] * 16 + viruses[1][1]
        )
        assert reward == 0.0
        assert terminated is True
        assert obs[viruses[1]] == -1
        assert info["event"] == TerminalEvent.DEFEAT.name

    def test_step_after_victory_scores_nothing(self) -> None:
        """Clicking a leftover virus after a win earns no second bonus."""
        env = ViralSweeperEnv(BoardConfig(6, 4))
        env.reset(seed=5)
        board = env.session.board
        env.step(0)
        for row, col in list(board.positions()):
            if env.session.is_over:
                break
            if board.get(row, col).is_hidden_safe:
                env.step(row * 6 + col)
        assert env.session.event == TerminalEvent.VICTORY

        row, col = next(
            pos for pos in board.positions() if board.get(*pos).is_hidden_virus
        )
        _, reward, terminated, _, info = env.step(row * 6 + col)
        assert reward == 0.0
        assert terminated is True
        assert info["event"] == TerminalEvent.VICTORY.name
        assert board.get(row, col).is_hidden_virus
