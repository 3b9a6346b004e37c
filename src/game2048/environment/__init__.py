"""
Game environment: board mechanics, game state machine and heuristics.
"""

from .board import Board, Direction, MoveResult, merge_row
from .game import Game, GameSnapshot, GameState, MoveOutcome, Score, Spawn
from .heuristics import evaluate_board
