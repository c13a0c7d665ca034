from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_puzzle.game import Color, GameConfig, GameSession, ScoringRules


RENDER_CELL_PX = 12

# rgb per cell value; row 0 is the empty cell, then one row per Color
CELL_PALETTE = np.array(
    [
        (30, 30, 36),
        (220, 60, 60),
        (60, 110, 220),
        (70, 200, 120),
        (235, 205, 60),
        (150, 80, 200),
        (240, 140, 40),
        (60, 200, 220),
    ],
    dtype=np.uint8,
)


def _compute_action_mask(session: GameSession) -> np.ndarray:
    size = session.config.grid_size
    k = session.config.pieces_per_set
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for piece_idx, row, col in session.valid_placements():
        if 0 <= piece_idx < k:
            mask[piece_idx, row, col] = True
    return mask


class BlockPuzzleEnv(gym.Env):
    """Gymnasium view of a `GameSession`.

    Actions are ``(piece_idx, row, col)`` triples; the reward is the engine's
    score delta scaled by `reward_scale`, or `invalid_action_penalty` for a
    rejected placement.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        render_mode: Optional[str] = None,
        reward_scale: float = 0.01,
        invalid_action_penalty: float = -0.1,
        terminal_penalty: float = 0.0,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.rules = rules
        self.render_mode = render_mode
        self.reward_scale = float(reward_scale)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        self.session = GameSession(self.config, self.rules)
        self.piece_box = self.session.catalog.max_extent()

        size = self.config.grid_size
        k = self.config.pieces_per_set
        box = self.piece_box

        # grid holds color values (0 = empty), pieces are per-slot block masks
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=len(Color), shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=0, high=1, shape=(k, box, box), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )
        self.action_space = spaces.MultiDiscrete((k, size, size))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        state = self.session.state
        k = self.config.pieces_per_set
        box = self.piece_box
        pieces = np.zeros((k, box, box), dtype=np.int8)
        for i, piece in enumerate(state.pieces[:k]):
            for r, c in piece.blocks:
                pieces[i, r, c] = 1
        return {
            "grid": np.array(state.board, dtype=np.int8),
            "pieces": pieces,
            "pieces_remaining": len(state.pieces),
        }

    def _get_info(self) -> Dict[str, Any]:
        state = self.session.state
        return {
            "action_mask": _compute_action_mask(self.session),
            "valid_actions": self.session.valid_placements(),
            "score": state.score,
            "streak": state.streak,
            "high_score": state.high_score,
            "steps": self._steps,
        }

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[dict] = None
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.session.catalog.rng.seed(seed)
        self.session.reset()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        piece_idx, row, col = map(int, action)

        outcome = self.session.place_piece(piece_idx, row, col)
        self._steps += 1

        reward_components: Dict[str, float] = {}
        if outcome.accepted:
            reward_components["score"] = self.reward_scale * float(outcome.points)
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        terminated = bool(outcome.state.game_over)
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = outcome.points
        info["lines_cleared"] = outcome.lines_cleared
        info["intersections"] = outcome.intersections
        return self._get_obs(), float(sum(reward_components.values())), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        board = np.asarray(self.session.state.board, dtype=np.intp)
        img = CELL_PALETTE[board]
        img = np.repeat(np.repeat(img, RENDER_CELL_PX, axis=0), RENDER_CELL_PX, axis=1)
        return img

    def close(self) -> None:
        pass
