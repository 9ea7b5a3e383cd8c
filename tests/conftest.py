"""
Shared pytest fixtures for bracket engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.elimination import create_bracket


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the web app at an empty temporary data directory."""
    import app as app_module

    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(app_module, 'DATA_DIR', str(data_dir))
    return data_dir


@pytest.fixture
def client(temp_data_dir):
    """Create a test client backed by a temporary data directory."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def four_player_bracket():
    """Bracket for A, B, C, D seeded in that order."""
    return create_bracket("Cup", ["A", "B", "C", "D"], "u1")


@pytest.fixture
def five_player_bracket():
    """Bracket for A..E, padded with three BYEs."""
    return create_bracket("Five", ["A", "B", "C", "D", "E"], "u1")


def name_of(bracket, participant_id):
    """Display name for a participant id, None for an empty slot."""
    participant = bracket.get_participant(participant_id)
    return participant.name if participant else None


def id_of(bracket, name):
    """Participant id for a display name."""
    for participant in bracket.participants:
        if participant.name == name:
            return participant.id
    raise KeyError(name)
