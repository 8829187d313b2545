from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetromino_engine.game import Action, GameConfig, GameState, ScoringRules, TetrisEngine

# Agent-facing subset of engine actions, indexed by the Discrete action.
AGENT_ACTIONS: Tuple[Action, ...] = (
    Action.LEFT,
    Action.RIGHT,
    Action.SOFT_DROP,
    Action.ROTATE,
    Action.HARD_DROP,
    Action.NONE,
)

PALETTE = {
    0: (20, 20, 26),
    1: (0, 240, 240),  # I
    2: (240, 240, 0),  # O
    3: (160, 0, 240),  # T
    4: (0, 240, 0),    # S
    5: (240, 0, 0),    # Z
    6: (0, 0, 240),    # J
    7: (240, 160, 0),  # L
}


class TetrisEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 render_mode: Optional[str] = None,
                 gravity_every: int = 1,
                 max_episode_steps: int = 5000) -> None:
        super().__init__()
        if gravity_every < 1:
            raise ValueError("gravity_every must be >= 1")
        self.render_mode = render_mode
        self.gravity_every = int(gravity_every)
        self.max_episode_steps = int(max_episode_steps)
        self._steps = 0
        self._frame_ms = 1000 // self.metadata["render_fps"]
        # Effect timestamps follow env steps, not the wall clock.
        self.engine = TetrisEngine(config, rules, clock=lambda: self._steps * self._frame_ms)

        height = self.engine.config.height
        width = self.engine.config.width
        n_kinds = len(PALETTE)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-(n_kinds - 1), high=n_kinds - 1, shape=(height, width), dtype=np.int8),
                "next": spaces.Discrete(n_kinds),
                "active": spaces.Discrete(n_kinds),
            }
        )
        self.action_space = spaces.Discrete(len(AGENT_ACTIONS))

        self.state: GameState = self.engine.create_initial_state()

    def _get_obs(self) -> Dict[str, Any]:
        active = self.state.active
        return {
            "grid": self.engine.observation(self.state),
            "next": int(self.state.next_kind),
            "active": int(active.kind) if active is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.state.score,
            "lines": self.state.lines,
            "level": self.state.level,
            "combo": self.state.combo,
            "holes": self.state.grid.count_holes(),
            "max_height": self.state.grid.max_height(),
            "column_heights": self.state.grid.column_heights(),
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng.seed(seed)
        self._steps = 0
        self.state = self.engine.spawn(self.engine.create_initial_state())
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        engine = self.engine
        prev_score = self.state.score
        state = engine.apply_action(self.state, AGENT_ACTIONS[int(action)])
        self._steps += 1

        if not state.game_over and self._steps % self.gravity_every == 0:
            state = engine.tick(state)
        if state.active is None and not state.game_over:
            state = engine.spawn(state)
        self.state = engine.prune_effects(state)

        reward = float(self.state.score - prev_score)
        terminated = bool(self.state.game_over)
        truncated = self._steps >= self.max_episode_steps
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self.engine.observation(self.state)
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = PALETTE[abs(int(grid[y, x]))]
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
