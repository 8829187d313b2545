"""Deterministic rules engine for a falling-block puzzle game."""

from .game import Action, GameConfig, GameState, Phase, ScoringRules, TetrisEngine

__all__ = ["Action", "GameConfig", "GameState", "Phase", "ScoringRules", "TetrisEngine"]

__version__ = "0.1.0"
