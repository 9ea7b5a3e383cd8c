"""
Unit tests for bracket export/import and summaries.
"""
import json
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.advancement import advance_winner
from engine.export import EXPORT_VERSION, InvalidExportError, export_bracket, import_bracket, summarize


class TestExport:
    """Tests for the export envelope."""

    def test_envelope(self, four_player_bracket):
        data = export_bracket(four_player_bracket)
        assert data['version'] == EXPORT_VERSION
        assert isinstance(data['exportedAt'], int)
        assert data['bracket'] == four_player_bracket.to_dict()

    def test_round_trip_through_json(self, five_player_bracket):
        match = five_player_bracket.round_matches(1)[1]
        advance_winner(five_player_bracket, match.id, match.participant1_id)
        text = json.dumps(export_bracket(five_player_bracket))
        assert import_bracket(json.loads(text)) == five_player_bracket

    def test_missing_version_accepted(self, four_player_bracket):
        restored = import_bracket({'bracket': four_player_bracket.to_dict()})
        assert restored == four_player_bracket


class TestImportValidation:
    """Tests for rejecting malformed import data."""

    @pytest.mark.parametrize("data", [
        None,
        [],
        {},
        {'bracket': None},
        {'bracket': {'name': 'No id'}},
    ])
    def test_rejects_non_exports(self, data):
        with pytest.raises(InvalidExportError, match="Invalid bracket export file"):
            import_bracket(data)

    def test_rejects_unknown_version(self, four_player_bracket):
        with pytest.raises(InvalidExportError, match="version"):
            import_bracket({'version': 99, 'bracket': four_player_bracket.to_dict()})

    def test_rejects_incomplete_bracket(self):
        with pytest.raises(InvalidExportError):
            import_bracket({'version': 1, 'bracket': {'id': 'x', 'name': 'Broken'}})

    @pytest.mark.parametrize("field, value", [
        ('participants', ['A', 'B']),
        ('byes', [42]),
        ('matches', []),
        ('rounds', ['round-1']),
    ])
    def test_rejects_malformed_bracket(self, four_player_bracket, field, value):
        """Wrongly shaped collections are reported as an invalid export."""
        data = export_bracket(four_player_bracket)
        data['bracket'][field] = value
        with pytest.raises(InvalidExportError):
            import_bracket(data)


class TestSummary:
    def test_summary(self, five_player_bracket):
        summary = summarize(five_player_bracket)
        assert summary == {
            'id': five_player_bracket.id,
            'name': 'Five',
            'description': None,
            'updatedAt': five_player_bracket.updated_at,
            'participantCount': 5,
            'roundCount': 3,
            'status': 'draft',
        }
