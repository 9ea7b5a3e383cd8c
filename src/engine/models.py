"""
Bracket data model.

Documents are plain JSON-compatible structures once passed through to_dict(),
so they can be stored or exported without a custom encoder.
"""
import time
from typing import List, Dict, Optional, Union

BYE_PREFIX = 'bye-'

STATUS_DRAFT = 'draft'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_COMPLETED = 'completed'


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def is_bye_id(participant_id: Optional[str]) -> bool:
    """Return True if the id belongs to a BYE placeholder."""
    return bool(participant_id) and participant_id.startswith(BYE_PREFIX)


class Entrant:
    """A real participant in the bracket."""
    is_bye = False

    def __init__(self, id, name, seed=None):
        self.id = id
        self.name = name
        self.seed = seed

    def to_dict(self) -> Dict:
        data = {'id': self.id, 'name': self.name}
        if self.seed is not None:
            data['seed'] = self.seed
        return data

    def __eq__(self, other):
        return isinstance(other, Entrant) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Entrant(id={self.id}, name={self.name}, seed={self.seed})"


class Bye:
    """Placeholder used to pad the field up to a power of two."""
    is_bye = True
    name = 'BYE'

    def __init__(self, id, seed):
        self.id = id
        self.seed = seed

    def to_dict(self) -> Dict:
        return {'id': self.id, 'name': self.name, 'seed': self.seed, 'isBye': True}

    def __eq__(self, other):
        return isinstance(other, Bye) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Bye(id={self.id}, seed={self.seed})"


Participant = Union[Entrant, Bye]


def participant_from_dict(data: Dict) -> Participant:
    if data.get('isBye'):
        return Bye(id=data['id'], seed=data.get('seed'))
    return Entrant(id=data['id'], name=data['name'], seed=data.get('seed'))


class Match:
    def __init__(self, id, round_id, position, participant1_id=None, participant2_id=None,
                 winner_id=None, next_match_id=None, is_final=False,
                 participant1_score=None, participant2_score=None):
        self.id = id
        self.round_id = round_id
        self.position = position
        self.participant1_id = participant1_id
        self.participant2_id = participant2_id
        self.winner_id = winner_id
        self.next_match_id = next_match_id
        self.is_final = is_final
        self.participant1_score = participant1_score
        self.participant2_score = participant2_score

    @property
    def participant_ids(self) -> List[Optional[str]]:
        return [self.participant1_id, self.participant2_id]

    def place_participant(self, participant_id: str, replaces: Optional[str] = None) -> None:
        """
        Put a participant advancing from a feeder match into one of the slots.

        A slot already holding participant_id (or `replaces`, the feeder's
        previous winner) is reused so re-advancing is idempotent; otherwise
        the first empty slot is taken. Does nothing if both slots are taken
        by other participants.
        """
        claimed = {participant_id, replaces} - {None}
        if self.participant1_id in claimed:
            self.participant1_id = participant_id
        elif self.participant2_id in claimed:
            self.participant2_id = participant_id
        elif self.participant1_id is None:
            self.participant1_id = participant_id
        elif self.participant2_id is None:
            self.participant2_id = participant_id

    def remove_participant(self, participant_id: str) -> None:
        """Empty the slot holding participant_id, if any."""
        if self.participant1_id == participant_id:
            self.participant1_id = None
        elif self.participant2_id == participant_id:
            self.participant2_id = None

    def to_dict(self) -> Dict:
        data = {
            'id': self.id,
            'roundId': self.round_id,
            'position': self.position,
            'participant1Id': self.participant1_id,
            'participant2Id': self.participant2_id,
            'winnerId': self.winner_id,
            'nextMatchId': self.next_match_id,
            'isFinal': self.is_final,
        }
        # Scores are optional and only written once recorded
        if self.participant1_score is not None:
            data['participant1Score'] = self.participant1_score
        if self.participant2_score is not None:
            data['participant2Score'] = self.participant2_score
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> 'Match':
        return cls(
            id=data['id'],
            round_id=data['roundId'],
            position=data['position'],
            participant1_id=data.get('participant1Id'),
            participant2_id=data.get('participant2Id'),
            winner_id=data.get('winnerId'),
            next_match_id=data.get('nextMatchId'),
            is_final=data.get('isFinal', False),
            participant1_score=data.get('participant1Score'),
            participant2_score=data.get('participant2Score'),
        )

    def __eq__(self, other):
        return isinstance(other, Match) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Match(id={self.id}, participants=({self.participant1_id}, {self.participant2_id}), "
                f"winner={self.winner_id}, next={self.next_match_id})")


class Round:
    def __init__(self, id, name, round_number, match_ids=None):
        self.id = id
        self.name = name
        self.round_number = round_number
        self.match_ids = match_ids if match_ids else []

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'roundNumber': self.round_number,
            'matchIds': list(self.match_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Round':
        return cls(data['id'], data['name'], data['roundNumber'], list(data.get('matchIds', [])))

    def __eq__(self, other):
        return isinstance(other, Round) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Round(name={self.name}, round_number={self.round_number}, matches={len(self.match_ids)})"


class BracketSettings:
    def __init__(self, third_place_match=False, elimination_type='single'):
        self.third_place_match = third_place_match
        self.elimination_type = elimination_type

    def to_dict(self) -> Dict:
        return {
            'thirdPlaceMatch': self.third_place_match,
            'eliminationType': self.elimination_type,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'BracketSettings':
        data = data or {}
        return cls(
            third_place_match=data.get('thirdPlaceMatch', False),
            elimination_type=data.get('eliminationType', 'single'),
        )

    def __eq__(self, other):
        return isinstance(other, BracketSettings) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"BracketSettings(third_place_match={self.third_place_match}, elimination_type={self.elimination_type})"


class BracketDocument:
    """
    Aggregate root for a single-elimination bracket.

    Matches are kept in a flat dict keyed by id and linked to each other
    through next_match_id, so lookups stay O(1) and the document serializes
    without nesting.
    """

    def __init__(self, id, name, created_by, created_at, updated_at,
                 participants=None, byes=None, rounds=None, matches=None,
                 status=STATUS_DRAFT, description=None, settings=None):
        self.id = id
        self.name = name
        self.description = description
        self.participants: List[Entrant] = participants if participants else []
        self.byes: List[Bye] = byes if byes else []
        self.rounds: List[Round] = rounds if rounds else []
        self.matches: Dict[str, Match] = matches if matches else {}
        self.status = status
        self.created_by = created_by
        self.created_at = created_at
        self.updated_at = updated_at
        self.settings = settings if settings else BracketSettings()

    def get_participant(self, participant_id: Optional[str]) -> Optional[Participant]:
        """Look up an entrant or BYE by id."""
        if participant_id is None:
            return None
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        for bye in self.byes:
            if bye.id == participant_id:
                return bye
        return None

    def get_final_match(self) -> Optional[Match]:
        for match in self.matches.values():
            if match.is_final:
                return match
        return None

    def round_matches(self, round_number: int) -> List[Match]:
        """Return the matches of a round (1-indexed) in position order."""
        for rnd in self.rounds:
            if rnd.round_number == round_number:
                return [self.matches[match_id] for match_id in rnd.match_ids]
        return []

    def to_dict(self) -> Dict:
        data = {
            'id': self.id,
            'name': self.name,
            'participants': [p.to_dict() for p in self.participants],
            'byes': [b.to_dict() for b in self.byes],
            'rounds': [r.to_dict() for r in self.rounds],
            'matches': {match_id: m.to_dict() for match_id, m in self.matches.items()},
            'status': self.status,
            'createdBy': self.created_by,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
            'settings': self.settings.to_dict(),
        }
        if self.description is not None:
            data['description'] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> 'BracketDocument':
        participants = []
        byes = []
        # Older exports may carry BYEs inline with the participants
        for item in data.get('participants', []) + data.get('byes', []):
            participant = participant_from_dict(item)
            if participant.is_bye:
                byes.append(participant)
            else:
                participants.append(participant)
        return cls(
            id=data['id'],
            name=data['name'],
            description=data.get('description'),
            participants=participants,
            byes=byes,
            rounds=[Round.from_dict(r) for r in data.get('rounds', [])],
            matches={match_id: Match.from_dict(m) for match_id, m in data.get('matches', {}).items()},
            status=data.get('status', STATUS_DRAFT),
            created_by=data['createdBy'],
            created_at=data['createdAt'],
            updated_at=data['updatedAt'],
            settings=BracketSettings.from_dict(data.get('settings')),
        )

    def __eq__(self, other):
        return isinstance(other, BracketDocument) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"BracketDocument(name={self.name}, participants={len(self.participants)}, "
                f"rounds={len(self.rounds)}, status={self.status})")
