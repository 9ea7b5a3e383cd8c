"""
Bracket export envelope and summaries.

Export files wrap the document:
    {"version": 1, "exportedAt": <ms>, "bracket": {...}}
"""
from typing import Dict

from .models import BracketDocument, now_ms

EXPORT_VERSION = 1


class InvalidExportError(ValueError):
    """Raised when imported data is not a bracket export."""


def export_bracket(bracket: BracketDocument) -> Dict:
    """Wrap a bracket document in a versioned export envelope."""
    return {
        'version': EXPORT_VERSION,
        'exportedAt': now_ms(),
        'bracket': bracket.to_dict(),
    }


def import_bracket(data: Dict) -> BracketDocument:
    """
    Rebuild a bracket from an export envelope.

    Raises:
        InvalidExportError: data is not an export envelope, the version is
            unsupported, or the bracket is missing required fields
    """
    if not isinstance(data, dict):
        raise InvalidExportError("Invalid bracket export file")
    bracket_data = data.get('bracket')
    if not isinstance(bracket_data, dict) or not bracket_data.get('id'):
        raise InvalidExportError("Invalid bracket export file")
    version = data.get('version', EXPORT_VERSION)
    if version != EXPORT_VERSION:
        raise InvalidExportError(f"Unsupported export version: {version}")
    try:
        return BracketDocument.from_dict(bracket_data)
    except KeyError as e:
        raise InvalidExportError(f"Invalid bracket document: missing {e}") from e
    except (TypeError, AttributeError) as e:
        raise InvalidExportError(f"Invalid bracket document: {e}") from e


def summarize(bracket: BracketDocument) -> Dict:
    """Summary used for listing brackets."""
    return {
        'id': bracket.id,
        'name': bracket.name,
        'description': bracket.description,
        'updatedAt': bracket.updated_at,
        'participantCount': len(bracket.participants),
        'roundCount': len(bracket.rounds),
        'status': bracket.status,
    }
