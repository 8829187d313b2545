from __future__ import annotations

import argparse
from typing import List, Optional

import gymnasium as gym

# Ensure envs are registered
import tetromino_engine.env  # noqa: F401


def run_random(episodes: int = 5, max_steps: int = 2000, seed: Optional[int] = None) -> List[float]:
    env = gym.make("Tetris-10x20-v0", max_episode_steps=max_steps)
    env.action_space.seed(seed)
    returns: List[float] = []
    for ep in range(episodes):
        obs, info = env.reset(seed=None if seed is None else seed + ep)
        total_reward = 0.0
        steps = 0
        while True:
            obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
            total_reward += float(reward)
            steps += 1
            if terminated or truncated:
                break
        returns.append(total_reward)
        print(f"episode {ep + 1}/{episodes}  score={info['score']}  lines={info['lines']}  "
              f"level={info['level']}  steps={steps}")
    env.close()
    return returns


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play random episodes against the engine")
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--max_steps", type=int, default=2000)
    p.add_argument("--seed", type=int, default=None)
    return p


def main() -> None:
    args = build_parser().parse_args()
    returns = run_random(args.episodes, args.max_steps, args.seed)
    mean = sum(returns) / max(1, len(returns))
    print(f"Random agent mean return over {len(returns)} episodes: {mean:.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
