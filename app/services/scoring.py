"""
Fantasy points calculation for a single completed match.

Everything here is pure: the result depends only on the two scores and the
round label, so a match can be re-scored at any time with identical output.
"""

from decimal import Decimal
from typing import Dict, Optional, Tuple

PERFECT_GAME_BONUS = 15
CLOSE_GAME_BONUS = 10
CLOSE_GAME_MARGIN = 5
KNOCKOUT_MULTIPLIER = Decimal("1.5")
KNOCKOUT_ROUND_MARKERS = ("final", "semi", "quarter")

CAPTAIN_MULTIPLIER = Decimal("2")
VICE_CAPTAIN_MULTIPLIER = Decimal("1.5")


def is_knockout_round(round_label: Optional[str]) -> bool:
    """True when the round label names a quarterfinal, semifinal or final."""
    if not round_label:
        return False
    label = round_label.lower()
    return any(marker in label for marker in KNOCKOUT_ROUND_MARKERS)


def calculate_bonus(player_score: int, opponent_score: int) -> int:
    """
    Bonus for the match winner.

    A shutout earns the perfect game bonus, otherwise a win by fewer than
    five points earns the close game bonus. Losers and draws earn nothing.
    """
    if player_score <= opponent_score:
        return 0
    if opponent_score == 0:
        return PERFECT_GAME_BONUS
    if player_score - opponent_score < CLOSE_GAME_MARGIN:
        return CLOSE_GAME_BONUS
    return 0


def calculate_player_points(
    player_score: int,
    opponent_score: int,
    round_label: Optional[str] = None
) -> Dict:
    """
    Calculate one player's fantasy points for a match.

    Args:
        player_score: Points the player scored in the match
        opponent_score: Points the opponent scored
        round_label: Free-text round name, e.g. "Round 1" or "Semifinal"

    Returns:
        Breakdown dict with base_points, bonus_points, is_knockout,
        knockout_multiplier, is_winner and total_points
    """
    if player_score < 0 or opponent_score < 0:
        raise ValueError("Match scores must be non-negative")

    base_points = int(player_score)
    bonus_points = calculate_bonus(player_score, opponent_score)
    knockout = is_knockout_round(round_label)
    multiplier = KNOCKOUT_MULTIPLIER if knockout else Decimal("1")

    total_points = Decimal(base_points + bonus_points) * multiplier

    return {
        "base_points": base_points,
        "bonus_points": bonus_points,
        "opponent_score": int(opponent_score),
        "is_winner": player_score > opponent_score,
        "is_knockout": knockout,
        "knockout_multiplier": str(multiplier),
        "total_points": total_points,
    }


def calculate_match_points(
    player1_score: int,
    player2_score: int,
    round_label: Optional[str] = None
) -> Tuple[Dict, Dict]:
    """Score both sides of a match. Returns (player1 breakdown, player2 breakdown)."""
    return (
        calculate_player_points(player1_score, player2_score, round_label),
        calculate_player_points(player2_score, player1_score, round_label),
    )


def role_multiplier(is_captain: bool, is_vice_captain: bool) -> Decimal:
    """Captain doubles a player's points, vice-captain adds half."""
    if is_captain:
        return CAPTAIN_MULTIPLIER
    if is_vice_captain:
        return VICE_CAPTAIN_MULTIPLIER
    return Decimal("1")
