from __future__ import annotations

import argparse
from typing import Optional

import gymnasium as gym
import numpy as np

# Ensure envs are registered
import block_puzzle.env  # noqa: F401
from block_puzzle.env.wrappers import FlattenDiscreteActionWrapper
from block_puzzle.utils.logging import setup_logger


def run_random(
    steps: int = 200, seed: Optional[int] = None, level: str = "info", use_rich: bool = True
) -> float:
    log = setup_logger(name="block_puzzle", use_rich=use_rich, level=level)
    env = FlattenDiscreteActionWrapper(gym.make("BlockPuzzle-8x8-v0"))
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # sample among valid placements only
        action = env.action_space.sample(mask=info["action_mask"].astype(np.int8))
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            log.info(
                "episode %d finished: score=%d high_score=%d",
                episodes,
                info["score"],
                info["high_score"],
            )
            obs, info = env.reset()
    env.close()
    log.info("random agent total reward: %.2f over %d finished episode(s)", total_reward, episodes)
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the block puzzle with a random valid-move agent")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", type=str, default="info")
    p.add_argument("--no-rich", action="store_true", help="plain stream logging instead of rich")
    return p


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    run_random(steps=args.steps, seed=args.seed, level=args.log_level, use_rich=not args.no_rich)


if __name__ == "__main__":  # pragma: no cover
    main()
