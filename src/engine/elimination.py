"""
Single elimination bracket generation.
"""
import uuid
from typing import List, Dict, Tuple, Optional

from .models import (
    BYE_PREFIX,
    STATUS_COMPLETED,
    STATUS_DRAFT,
    BracketDocument,
    BracketSettings,
    Bye,
    Entrant,
    Match,
    Round,
    now_ms,
)
from .seeding import calculate_bracket_size, calculate_byes, calculate_total_rounds, generate_seed_order


def get_round_name(round_number: int, total_rounds: int) -> str:
    """
    Get the name of a round from its distance to the final.
    The opening round is always "Round 1" unless it is the final itself.
    """
    if round_number == total_rounds:
        return "Finals"
    elif round_number == 1:
        return "Round 1"
    elif round_number == total_rounds - 1:
        return "Semifinals"
    elif round_number == total_rounds - 2:
        return "Quarterfinals"
    else:
        return f"Round {round_number}"


def create_entrants(participant_names: List[str]) -> List[Entrant]:
    """Seeds follow input order: the first name is seed 1."""
    return [
        Entrant(id=str(uuid.uuid4()), name=name, seed=index + 1)
        for index, name in enumerate(participant_names)
    ]


def create_byes(num_participants: int) -> List[Bye]:
    """
    Create BYE placeholders for the weakest seeds, from the bracket size downward.
    """
    bracket_size = calculate_bracket_size(num_participants)
    return [
        Bye(id=f"{BYE_PREFIX}{uuid.uuid4()}", seed=bracket_size - offset)
        for offset in range(calculate_byes(num_participants))
    ]


def _resolve_bye(match: Match, lookup: Dict[str, object]) -> None:
    """Decide a match immediately when a real entrant faces a BYE."""
    p1 = lookup.get(match.participant1_id)
    p2 = lookup.get(match.participant2_id)
    if p1 is None or p2 is None:
        return
    if p1.is_bye and not p2.is_bye:
        match.winner_id = p2.id
    elif p2.is_bye and not p1.is_bye:
        match.winner_id = p1.id


def create_bracket_structure(entrants: List[Entrant], byes: List[Bye]) -> Tuple[List[Round], Dict[str, Match]]:
    """
    Create rounds and matches for seeded entrants padded with BYEs.

    First round pairings come from the standard seed order. Each later match
    is fed by two consecutive matches of the previous round: the winner of the
    even feeder fills slot 1, the odd feeder fills slot 2. Winners already
    known (BYE matches) are pushed forward as each round is built, so chains
    of BYEs resolve without any user input.

    Returns (rounds, matches) where matches is keyed by match id.
    """
    total_rounds = calculate_total_rounds(len(entrants))
    rounds: List[Round] = []
    matches: Dict[str, Match] = {}
    if total_rounds == 0:
        return rounds, matches

    bracket_size = calculate_bracket_size(len(entrants))
    seed_order = generate_seed_order(bracket_size)
    lookup = {p.id: p for p in entrants + byes}
    seed_to_participant = {p.seed: p for p in entrants + byes}

    previous_round: List[Match] = []
    for round_number in range(1, total_rounds + 1):
        round_id = f"round-{round_number}"
        round_matches = []
        num_matches = bracket_size // (2 ** round_number)

        for position in range(num_matches):
            match = Match(
                id=f"match-r{round_number}-{position}",
                round_id=round_id,
                position=position,
                is_final=round_number == total_rounds,
            )
            if round_number == 1:
                match.participant1_id = seed_to_participant[seed_order[position * 2]].id
                match.participant2_id = seed_to_participant[seed_order[position * 2 + 1]].id
            else:
                feeder1 = previous_round[position * 2]
                feeder2 = previous_round[position * 2 + 1]
                feeder1.next_match_id = match.id
                feeder2.next_match_id = match.id
                match.participant1_id = feeder1.winner_id
                match.participant2_id = feeder2.winner_id

            _resolve_bye(match, lookup)
            round_matches.append(match)
            matches[match.id] = match

        rounds.append(Round(
            id=round_id,
            name=get_round_name(round_number, total_rounds),
            round_number=round_number,
            match_ids=[m.id for m in round_matches],
        ))
        previous_round = round_matches

    return rounds, matches


def create_bracket(name: str, participant_names: List[str], created_by: str,
                   description: Optional[str] = None,
                   third_place_match: bool = False) -> BracketDocument:
    """
    Create a new single elimination bracket document.

    Args:
        name: Bracket display name
        participant_names: Names in seed order (first name is seed 1)
        created_by: Opaque id of the creator
        description: Optional description
        third_place_match: Stored in the settings; no extra match is built

    A single participant produces a bracket with no rounds that is already
    completed, with that participant as champion.
    """
    if not participant_names:
        raise ValueError("A bracket needs at least one participant")

    entrants = create_entrants(participant_names)
    byes = create_byes(len(entrants))
    rounds, matches = create_bracket_structure(entrants, byes)

    now = now_ms()
    return BracketDocument(
        id=str(uuid.uuid4()),
        name=name,
        description=description,
        participants=entrants,
        byes=byes,
        rounds=rounds,
        matches=matches,
        status=STATUS_COMPLETED if len(entrants) == 1 else STATUS_DRAFT,
        created_by=created_by,
        created_at=now,
        updated_at=now,
        settings=BracketSettings(third_place_match=third_place_match, elimination_type='single'),
    )
