"""
Recording results and moving winners through a bracket.
"""
import copy
from typing import Optional

from .models import STATUS_COMPLETED, STATUS_IN_PROGRESS, BracketDocument, now_ms


class InvalidWinnerError(ValueError):
    """Raised when the declared winner is not one of the match's participants."""

    def __init__(self, match_id, winner_id):
        super().__init__(f"{winner_id!r} is not a participant of match {match_id!r}")
        self.match_id = match_id
        self.winner_id = winner_id


def compute_status(bracket: BracketDocument) -> str:
    """Completed once the final has a winner, in progress otherwise."""
    final_match = bracket.get_final_match()
    if final_match is not None and final_match.winner_id:
        return STATUS_COMPLETED
    return STATUS_IN_PROGRESS


def get_champion(bracket: BracketDocument) -> Optional[str]:
    """
    Return the id of the bracket winner, or None while undecided.
    A bracket with a single entrant and no matches is won by that entrant.
    """
    if not bracket.matches:
        if len(bracket.participants) == 1:
            return bracket.participants[0].id
        return None
    final_match = bracket.get_final_match()
    return final_match.winner_id if final_match else None


def _clear_stale_results(bracket: BracketDocument, match, stale_id: str) -> None:
    """
    Undo downstream results won by a participant who no longer reaches them.
    Starting at match, each result won by stale_id is cleared and stale_id is
    taken out of the following match, until a match not won by stale_id.
    """
    while match is not None and match.winner_id == stale_id:
        match.winner_id = None
        match = bracket.matches.get(match.next_match_id) if match.next_match_id else None
        if match is not None:
            match.remove_participant(stale_id)


def advance_winner(bracket: BracketDocument, match_id: str, winner_id: str,
                   in_place: bool = True) -> BracketDocument:
    """
    Record the winner of a match and move them into the next match.

    An unknown match_id is ignored and the bracket is returned untouched.
    Calling again for the same match is safe: the downstream slot that holds
    this match's winner (old or new) is reused rather than a second slot
    being filled. When a corrected result changes the winner, downstream
    results the previous winner had already collected are cleared, so every
    decided match is won by one of its own participants.

    With in_place=False the input is left unchanged and an updated copy is
    returned.

    Raises:
        InvalidWinnerError: winner_id is not one of the match's participants
    """
    match = bracket.matches.get(match_id)
    if match is None:
        return bracket
    if winner_id is None or winner_id not in match.participant_ids:
        raise InvalidWinnerError(match_id, winner_id)

    if not in_place:
        bracket = copy.deepcopy(bracket)
        match = bracket.matches[match_id]

    previous_winner = match.winner_id
    match.winner_id = winner_id

    if match.next_match_id:
        next_match = bracket.matches.get(match.next_match_id)
        if next_match is not None:
            next_match.place_participant(winner_id, replaces=previous_winner)
            if previous_winner and previous_winner != winner_id:
                _clear_stale_results(bracket, next_match, previous_winner)

    bracket.updated_at = now_ms()
    bracket.status = compute_status(bracket)
    return bracket


def record_score(bracket: BracketDocument, match_id: str,
                 participant1_score: Optional[float], participant2_score: Optional[float]) -> BracketDocument:
    """Store the scores of a match. Does not decide the winner."""
    match = bracket.matches.get(match_id)
    if match is None:
        return bracket
    match.participant1_score = participant1_score
    match.participant2_score = participant2_score
    bracket.updated_at = now_ms()
    return bracket
