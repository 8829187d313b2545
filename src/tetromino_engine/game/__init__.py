"""Game module for the tetromino engine.

Exports the rules engine and supporting classes:
- GameGrid: Immutable board with collision, placement and line clearing
- Piece: Falling tetromino with on-demand rotation
- TetrominoType: Enum of available piece types
- ScoringRules: Line, combo, hard-drop and level arithmetic
- Effects: Advisory animation hints carried by every state
- TetrisEngine: Pure state transitions over GameState
"""

from .effects import ComboAnnouncement, Effects, PopupCategory, ScorePopup, VerticalTrail
from .grid import ClearResult, GameGrid
from .pieces import BASE_SHAPES, Piece, TetrominoType, bounding_columns, bounding_rows, rotate
from .rules import ScoringRules
from .core import WALL_KICKS, Action, GameConfig, GameState, Phase, TetrisEngine

__all__ = [
    "ComboAnnouncement",
    "Effects",
    "PopupCategory",
    "ScorePopup",
    "VerticalTrail",
    "ClearResult",
    "GameGrid",
    "BASE_SHAPES",
    "Piece",
    "TetrominoType",
    "bounding_columns",
    "bounding_rows",
    "rotate",
    "ScoringRules",
    "WALL_KICKS",
    "Action",
    "GameConfig",
    "GameState",
    "Phase",
    "TetrisEngine",
]
