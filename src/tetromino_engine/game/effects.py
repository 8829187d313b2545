"""Advisory animation hints attached to every game state.

Nothing in here feeds back into game logic. The presentation layer reads these
records and calls :func:`prune` on its own cadence to expire them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple


class PopupCategory(str, Enum):
    LINE_CLEAR = "line-clear"
    HARD_DROP = "hard-drop"


@dataclass(frozen=True)
class ScorePopup:
    id: str
    value: int
    x: int
    y: int
    t: int
    category: PopupCategory
    label: Optional[str] = None


@dataclass(frozen=True)
class VerticalTrail:
    id: str
    x: int
    y: int
    h: int
    t: int


@dataclass(frozen=True)
class ComboAnnouncement:
    id: str
    combo_count: int
    t: int


@dataclass(frozen=True)
class Effects:
    clearing_rows: Tuple[int, ...] = ()
    score_popups: Tuple[ScorePopup, ...] = field(default_factory=tuple)
    hard_drop_animating: bool = False
    vertical_trails: Tuple[VerticalTrail, ...] = field(default_factory=tuple)
    combo_animation: Optional[ComboAnnouncement] = None

    @property
    def is_clearing(self) -> bool:
        return len(self.clearing_rows) > 0


def prune(effects: Effects, now: int, popup_ttl_ms: int, trail_ttl_ms: int, combo_ttl_ms: int) -> Effects:
    """Drop records older than their TTL; returns ``effects`` itself if nothing expired."""
    popups = tuple(p for p in effects.score_popups if now - p.t < popup_ttl_ms)
    trails = tuple(t for t in effects.vertical_trails if now - t.t < trail_ttl_ms)
    combo = effects.combo_animation
    if combo is not None and now - combo.t >= combo_ttl_ms:
        combo = None
    animating = effects.hard_drop_animating and len(trails) > 0

    if (
        len(popups) == len(effects.score_popups)
        and len(trails) == len(effects.vertical_trails)
        and combo is effects.combo_animation
        and animating == effects.hard_drop_animating
    ):
        return effects
    return replace(
        effects,
        score_popups=popups,
        vertical_trails=trails,
        combo_animation=combo,
        hard_drop_animating=animating,
    )
