"""
The 'AI' opponent: picks any legal move at random. No search, no evaluation.
"""

import random
from typing import Optional

from src.chess.game import Game, Move
from src.chess.pieces import PieceType

# The random player never bothers with under-promotion
PROMOTION_CHOICE = PieceType.QUEEN


def choose_random_move(game: Game, rng: Optional[random.Random] = None) -> Optional[Move]:
    """A uniformly chosen legal move for the player to move, None if there is none."""
    legal_moves = game.legal_moves()
    if not legal_moves:
        return None
    return (rng or random).choice(legal_moves)
