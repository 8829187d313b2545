"""Gymnasium environments for the tetromino engine."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .tetris_env import AGENT_ACTIONS, TetrisEnv

# Register default 10x20 environment
register(
    id="Tetris-10x20-v0",
    entry_point="tetromino_engine.env.tetris_env:TetrisEnv",
)

__all__ = ["AGENT_ACTIONS", "TetrisEnv"]
