from __future__ import annotations

from typing import Any, Dict, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (piece, row, col) -> Discrete(k * size * size).

    Order is C-order over (piece, row, col). The env's ``info["action_mask"]``
    is republished flattened on reset and step, and the latest one is kept
    for `action_masks()`.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        if not isinstance(env.action_space, spaces.MultiDiscrete):
            raise TypeError("FlattenDiscreteActionWrapper needs a MultiDiscrete action space")
        self.nvec = tuple(int(n) for n in env.action_space.nvec)
        self.action_space = spaces.Discrete(int(np.prod(self.nvec)))
        self._mask = np.zeros(self.action_space.n, dtype=np.bool_)

    def action(self, action: int) -> np.ndarray:  # type: ignore[override]
        return np.array(np.unravel_index(int(action), self.nvec), dtype=np.int64)

    def _flatten_info(self, info: Dict[str, Any]) -> Dict[str, Any]:
        info = dict(info)
        self._mask = np.asarray(info["action_mask"], dtype=np.bool_).reshape(-1)
        info["action_mask"] = self._mask
        return info

    def reset(self, **kwargs) -> Tuple[Dict[str, Any], Dict[str, Any]]:  # type: ignore[override]
        obs, info = self.env.reset(**kwargs)
        return obs, self._flatten_info(info)

    def step(self, action: int):  # type: ignore[override]
        obs, reward, terminated, truncated, info = self.env.step(self.action(action))
        return obs, reward, terminated, truncated, self._flatten_info(info)

    def action_masks(self) -> np.ndarray:
        return self._mask.copy()
