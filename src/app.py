"""
Flask web application for Bracket Engine.
"""
import io
import json
import os
import logging
from datetime import datetime
from flask import Flask, request, jsonify, send_file
from engine.advancement import InvalidWinnerError, advance_winner, get_champion, record_score
from engine.elimination import create_bracket
from engine.export import InvalidExportError, export_bracket, import_bracket
from store import BracketStore

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('BRACKET_DATA_DIR', os.path.join(BASE_DIR, 'data'))
MAX_UPLOAD_SIZE = 1 * 1024 * 1024  # 1 MB
MIN_PARTICIPANTS = 2

app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE

if not app.debug:
    app.logger.setLevel(logging.INFO)


def _get_store() -> BracketStore:
    """Return the bracket store for the configured data directory."""
    return BracketStore(DATA_DIR)


def _bracket_payload(bracket) -> dict:
    """Serialize a bracket for a response, with the current champion if any."""
    data = bracket.to_dict()
    data['championId'] = get_champion(bracket)
    return data


def _not_found(bracket_id: str):
    return jsonify({'success': False, 'error': f'Bracket "{bracket_id}" not found.'}), 404


@app.route('/api/brackets', methods=['GET'])
def api_list_brackets():
    """List saved brackets, most recently updated first."""
    return jsonify({'success': True, 'brackets': _get_store().list_summaries()})


@app.route('/api/brackets', methods=['POST'])
def api_create_bracket():
    """Create a bracket from a name and an ordered list of participant names."""
    data = request.get_json(silent=True) or {}
    name = str(data.get('name', '')).strip()
    participants = data.get('participants') or []
    created_by = str(data.get('createdBy', '')).strip() or 'anonymous'

    if not name:
        return jsonify({'success': False, 'error': 'Bracket name is required.'}), 400
    if not isinstance(participants, list):
        return jsonify({'success': False, 'error': 'Participants must be a list of names.'}), 400
    participants = [str(p).strip() for p in participants if str(p).strip()]
    if len(participants) < MIN_PARTICIPANTS:
        return jsonify({'success': False, 'error': f'At least {MIN_PARTICIPANTS} participants are required.'}), 400
    if len(set(participants)) != len(participants):
        return jsonify({'success': False, 'error': 'Participant names must be unique.'}), 400

    bracket = create_bracket(
        name,
        participants,
        created_by,
        description=data.get('description'),
        third_place_match=bool(data.get('thirdPlaceMatch', False)),
    )
    _get_store().save(bracket)
    app.logger.info(f'Created bracket {bracket.id} "{name}" with {len(participants)} participants')
    return jsonify({'success': True, 'bracket': _bracket_payload(bracket)}), 201


@app.route('/api/brackets/<bracket_id>', methods=['GET'])
def api_get_bracket(bracket_id):
    bracket = _get_store().get(bracket_id)
    if bracket is None:
        return _not_found(bracket_id)
    return jsonify({'success': True, 'bracket': _bracket_payload(bracket)})


@app.route('/api/brackets/<bracket_id>', methods=['DELETE'])
def api_delete_bracket(bracket_id):
    if not _get_store().delete(bracket_id):
        return _not_found(bracket_id)
    app.logger.info(f'Deleted bracket {bracket_id}')
    return jsonify({'success': True})


@app.route('/api/brackets/<bracket_id>/advance', methods=['POST'])
def api_advance_winner(bracket_id):
    """Record the winner of a match and move them to the next match."""
    data = request.get_json(silent=True) or {}
    match_id = data.get('matchId')
    winner_id = data.get('winnerId')
    if not match_id or not winner_id:
        return jsonify({'success': False, 'error': 'matchId and winnerId are required.'}), 400

    try:
        bracket = _get_store().update(bracket_id, lambda b: advance_winner(b, match_id, winner_id))
    except InvalidWinnerError as e:
        app.logger.warning(f'Rejected winner for bracket {bracket_id}: {e}')
        return jsonify({'success': False, 'error': str(e)}), 400
    if bracket is None:
        return _not_found(bracket_id)
    return jsonify({'success': True, 'bracket': _bracket_payload(bracket)})


@app.route('/api/brackets/<bracket_id>/score', methods=['POST'])
def api_record_score(bracket_id):
    """Store the scores of a match."""
    data = request.get_json(silent=True) or {}
    match_id = data.get('matchId')
    if not match_id or not isinstance(match_id, str):
        return jsonify({'success': False, 'error': 'matchId is required.'}), 400
    try:
        score1 = _parse_score(data.get('score1'))
        score2 = _parse_score(data.get('score2'))
    except ValueError:
        return jsonify({'success': False, 'error': 'Scores must be numbers.'}), 400

    store = _get_store()
    bracket = store.get(bracket_id)
    if bracket is None:
        return _not_found(bracket_id)
    if match_id not in bracket.matches:
        return jsonify({'success': False, 'error': f'Match "{match_id}" not found.'}), 404

    bracket = store.update(bracket_id, lambda b: record_score(b, match_id, score1, score2))
    if bracket is None:
        return _not_found(bracket_id)
    return jsonify({'success': True, 'bracket': _bracket_payload(bracket)})


def _parse_score(value):
    """Scores are optional numbers; blank clears the score."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValueError(value)
    number = float(value)
    return int(number) if number.is_integer() else number


@app.route('/api/brackets/<bracket_id>/export', methods=['GET'])
def api_export_bracket(bracket_id):
    """Download a bracket as a JSON export file."""
    bracket = _get_store().get(bracket_id)
    if bracket is None:
        return _not_found(bracket_id)
    buffer = io.BytesIO(json.dumps(export_bracket(bracket), indent=2).encode('utf-8'))
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return send_file(
        buffer,
        mimetype='application/json',
        as_attachment=True,
        download_name=f'bracket_{bracket_id}_{timestamp}.json',
    )


@app.route('/api/brackets/import', methods=['POST'])
def api_import_bracket():
    """Import a bracket from an uploaded export file or a JSON body."""
    file = request.files.get('file')
    try:
        if file is not None:
            if file.filename == '':
                return jsonify({'success': False, 'error': 'No file selected.'}), 400
            data = json.loads(file.read().decode('utf-8'))
        else:
            data = request.get_json(silent=True)
        bracket = import_bracket(data)
        _get_store().save(bracket)
    except (InvalidExportError, ValueError) as e:
        app.logger.warning(f'Bracket import failed: {e}')
        return jsonify({'success': False, 'error': str(e)}), 400

    app.logger.info(f'Imported bracket {bracket.id} "{bracket.name}"')
    return jsonify({'success': True, 'bracket': _bracket_payload(bracket)}), 201


if __name__ == '__main__':
    app.run(debug=True, port=5000)
