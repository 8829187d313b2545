from __future__ import annotations

import itertools
import random
import time
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .effects import ComboAnnouncement, Effects, PopupCategory, ScorePopup, VerticalTrail, prune
from .grid import GameGrid
from .pieces import Piece, TetrominoType, bounding_columns
from .rules import ScoringRules


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    HARD_DROP = 4
    TICK = 5
    SPAWN = 6
    TOGGLE_PAUSE = 7
    RESTART = 8
    NONE = 9


class Phase(str, Enum):
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


# Tried in order after an in-place rotation fails.
WALL_KICKS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (-1, -1), (1, -1))


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    staged_line_clears: bool = False
    popup_ttl_ms: int = 1200
    trail_ttl_ms: int = 150
    combo_ttl_ms: int = 2000

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")
        for name in ("popup_ttl_ms", "trail_ttl_ms", "combo_ttl_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game; successors are built with ``dataclasses.replace``."""

    grid: GameGrid
    active: Optional[Piece]
    next_kind: TetrominoType
    score: int = 0
    level: int = 1
    lines: int = 0
    combo: int = 0
    phase: Phase = Phase.READY
    effects: Effects = field(default_factory=Effects)

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.phase is Phase.PAUSED

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class TetrisEngine:
    """Pure transition functions over :class:`GameState`.

    The engine's only mutable members are the random source used to draw the
    next piece and the counter that names effect records. Every transition
    returns a new snapshot, or the input snapshot itself when the action does
    nothing.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng if rng is not None else random.Random(self.config.random_seed)
        self.clock = clock or _wall_clock_ms
        self._effect_ids = itertools.count(1)
        self._dispatch: Dict[Action, Callable[[GameState], GameState]] = {
            Action.LEFT: lambda s: self.move(s, -1, 0),
            Action.RIGHT: lambda s: self.move(s, 1, 0),
            Action.SOFT_DROP: lambda s: self.move(s, 0, 1),
            Action.ROTATE: self.rotate,
            Action.HARD_DROP: self.hard_drop,
            Action.TICK: self.tick,
            Action.SPAWN: self.spawn,
            Action.TOGGLE_PAUSE: self.toggle_pause,
            Action.RESTART: self.restart,
            Action.NONE: lambda s: s,
        }

    def _random_kind(self) -> TetrominoType:
        return self.rng.choice(list(TetrominoType))

    def _effect_id(self) -> str:
        return f"fx-{next(self._effect_ids)}"

    def create_initial_state(self) -> GameState:
        return GameState(
            grid=GameGrid.empty(self.config.width, self.config.height),
            active=None,
            next_kind=self._random_kind(),
        )

    def restart(self, state: GameState) -> GameState:
        return self.create_initial_state()

    def toggle_pause(self, state: GameState) -> GameState:
        if state.phase is Phase.RUNNING:
            return replace(state, phase=Phase.PAUSED)
        if state.phase is Phase.PAUSED:
            return replace(state, phase=Phase.RUNNING)
        return state

    def spawn(self, state: GameState) -> GameState:
        if state.phase not in (Phase.READY, Phase.RUNNING) or state.active is not None:
            return state
        if state.effects.is_clearing:
            return state
        # No collision test here: an overlapping spawn is caught by the
        # top-out check after the following lock.
        piece = Piece(state.next_kind, x=state.width // 2 - 1, y=0)
        return replace(state, active=piece, next_kind=self._random_kind(), phase=Phase.RUNNING)

    def _can_act(self, state: GameState) -> bool:
        return state.phase is Phase.RUNNING and state.active is not None and not state.effects.is_clearing

    def move(self, state: GameState, dx: int, dy: int) -> GameState:
        if not self._can_act(state):
            return state
        assert state.active is not None
        candidate = state.active.moved(dx, dy)
        if not state.grid.collides(candidate):
            return replace(state, active=candidate)
        if dy > 0:
            if self.config.staged_line_clears and state.grid.place(state.active).full_rows():
                return self.preview_lock(state)
            return self._lock(state, state.active)
        return state

    def tick(self, state: GameState) -> GameState:
        if state.phase in (Phase.READY, Phase.RUNNING) and state.active is None:
            return self.spawn(state)
        return self.move(state, 0, 1)

    def rotate(self, state: GameState) -> GameState:
        if not self._can_act(state):
            return state
        assert state.active is not None
        rotated = state.active.rotated(1)
        for dx, dy in ((0, 0),) + WALL_KICKS:
            candidate = rotated.moved(dx, dy)
            if not state.grid.collides(candidate):
                return replace(state, active=candidate)
        return state

    def _landing(self, grid: GameGrid, piece: Piece) -> Piece:
        while not grid.collides(piece.moved(0, 1)):
            piece = piece.moved(0, 1)
        return piece

    def ghost_position(self, state: GameState) -> Optional[Piece]:
        if state.active is None:
            return None
        return self._landing(state.grid, state.active)

    def hard_drop(self, state: GameState) -> GameState:
        if not self._can_act(state):
            return state
        assert state.active is not None
        landing = self._landing(state.grid, state.active)
        return self._lock(state, landing, dropped_from=state.active)

    def drop_at_column(self, state: GameState, column: int) -> GameState:
        """Shift the active piece so its origin sits on ``column``, then hard drop.

        The shift is a single move: if the target position collides the piece
        is dropped from where it is.
        """
        if not self._can_act(state):
            return state
        assert state.active is not None
        shifted = self.move(state, column - state.active.x, 0)
        return self.hard_drop(shifted)

    def preview_lock(self, state: GameState) -> GameState:
        """Stage the rows the active piece would clear without touching the board."""
        if not self._can_act(state):
            return state
        assert state.active is not None
        if not state.grid.collides(state.active.moved(0, 1)):
            return state
        full = state.grid.place(state.active).full_rows()
        if not full:
            return state
        value = self._line_clear_value(state, len(full))
        popup = ScorePopup(
            id=self._effect_id(),
            value=value,
            x=state.width // 2,
            y=full[len(full) // 2],
            t=self.clock(),
            category=PopupCategory.LINE_CLEAR,
        )
        effects = replace(
            state.effects,
            clearing_rows=tuple(full),
            score_popups=state.effects.score_popups + (popup,),
        )
        return replace(state, effects=effects)

    def commit_lock(self, state: GameState) -> GameState:
        """Apply a lock previously staged by :meth:`preview_lock`."""
        if state.phase is not Phase.RUNNING or state.active is None or not state.effects.is_clearing:
            return state
        return self._lock(state, state.active)

    def _line_clear_value(self, state: GameState, lines: int) -> int:
        score = self.rules.line_score(lines, state.level)
        if lines > 0:
            score = self.rules.combo_score(score, state.combo)
        return score

    def _lock(self, state: GameState, piece: Piece, dropped_from: Optional[Piece] = None) -> GameState:
        placed = state.grid.place(piece)
        full = placed.full_rows()
        cleared = placed.clear_rows()
        lines = cleared.lines_cleared

        # Score against the level and combo in force before this lock.
        line_score = self._line_clear_value(state, lines)
        combo = state.combo + 1 if lines > 0 else 0
        total_lines = state.lines + lines

        gained = line_score
        if dropped_from is not None:
            gained += self.rules.hard_drop_score(piece.y - dropped_from.y)

        now = self.clock()
        announcement = None
        if combo >= 2:
            announcement = ComboAnnouncement(id=self._effect_id(), combo_count=combo, t=now)
        staged = state.effects.is_clearing
        effects = replace(state.effects, clearing_rows=(), combo_animation=announcement)

        if dropped_from is not None:
            popup = ScorePopup(
                id=self._effect_id(),
                value=gained,
                x=state.width // 2,
                y=piece.y,
                t=now,
                category=PopupCategory.HARD_DROP,
                label="HARD DROP",
            )
            effects = replace(
                effects,
                score_popups=effects.score_popups + (popup,),
                vertical_trails=self._trails(dropped_from, piece, now),
                hard_drop_animating=True,
            )
        elif lines > 0 and not staged:
            popup = ScorePopup(
                id=self._effect_id(),
                value=line_score,
                x=state.width // 2,
                y=full[len(full) // 2],
                t=now,
                category=PopupCategory.LINE_CLEAR,
            )
            effects = replace(effects, score_popups=effects.score_popups + (popup,))

        # Top-out is judged on the board after clearing; the lock stays applied.
        phase = Phase.GAME_OVER if cleared.grid.is_topped() else state.phase
        return replace(
            state,
            grid=cleared.grid,
            active=None,
            score=state.score + gained,
            lines=total_lines,
            level=self.rules.level_for_lines(total_lines),
            combo=combo,
            phase=phase,
            effects=effects,
        )

    def _trails(self, start: Piece, landing: Piece, now: int) -> Tuple[VerticalTrail, ...]:
        shape = start.shape()
        lo, hi = bounding_columns(start)
        trails: List[VerticalTrail] = []
        for col in range(lo, hi + 1):
            rows = np.flatnonzero(shape[:, col])
            if rows.size == 0:
                continue
            top = start.y + int(rows[0])
            bottom = landing.y + int(rows[-1]) + 1
            trails.append(VerticalTrail(id=self._effect_id(), x=landing.x + col, y=top, h=bottom - top, t=now))
        return tuple(trails)

    def apply_action(self, state: GameState, action: Action) -> GameState:
        return self._dispatch[Action(action)](state)

    def drop_interval_ms(self, state: GameState) -> int:
        return self.rules.drop_interval_ms(state.level)

    def prune_effects(self, state: GameState, now: Optional[int] = None) -> GameState:
        if now is None:
            now = self.clock()
        effects = prune(
            state.effects,
            now,
            popup_ttl_ms=self.config.popup_ttl_ms,
            trail_ttl_ms=self.config.trail_ttl_ms,
            combo_ttl_ms=self.config.combo_ttl_ms,
        )
        if effects is state.effects:
            return state
        return replace(state, effects=effects)

    def observation(self, state: GameState) -> np.ndarray:
        # Locked cells as-is, active piece as -kind.
        obs = state.grid.to_array()
        if state.active is not None and not state.game_over:
            for x, y in state.active.cells():
                if 0 <= y < state.height and 0 <= x < state.width:
                    obs[y, x] = -int(state.active.kind)
        return obs
