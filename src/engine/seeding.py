"""
Standard tournament seeding helpers.
"""
import math
from typing import List


def calculate_bracket_size(num_participants: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_participants <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_participants))


def calculate_byes(num_participants: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_participants) - num_participants


def calculate_total_rounds(num_participants: int) -> int:
    """Number of rounds needed: ceil(log2(n)), zero for a single participant."""
    if num_participants <= 1:
        return 0
    return math.ceil(math.log2(num_participants))


def generate_seed_order(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.
    Consumed two at a time, the order gives the first round pairings, and
    if all higher seeds win they meet as late as possible.

    For 8 slots: [1, 8, 4, 5, 2, 7, 3, 6]
    This gives matchups: 1v8, 4v5, 2v7, 3v6
    Winners: 1v4 side, 2v3 side
    Final: 1v2 (if chalk)
    """
    if bracket_size < 1 or bracket_size & (bracket_size - 1):
        raise ValueError(f"Bracket size must be a positive power of two, got {bracket_size}")
    if bracket_size == 1:
        return [1]

    order = [1, 2]
    size = 2
    while size < bracket_size:
        # Each seed is followed by its complement in the doubled bracket
        order = [s for seed in order for s in (seed, 2 * size + 1 - seed)]
        size *= 2
    return order
