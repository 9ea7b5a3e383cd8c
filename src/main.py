# Entry point of the application: build a bracket from a YAML list of participants

import argparse
import json
import os
import sys
import yaml
from engine.elimination import create_bracket
from engine.export import export_bracket
from engine.models import is_bye_id


def load_participants(file_path):
    """
    Load participant names in seed order.
    The file holds either a list of names or a mapping with a 'participants' list.
    """
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)
    if isinstance(data, dict):
        data = data.get('participants')
    if not data:
        return []
    return [str(name).strip() for name in data if str(name).strip()]


def format_bracket(bracket):
    lines = [f"# {bracket.name}"]
    for rnd in bracket.rounds:
        lines.append("")
        lines.append(f"## {rnd.name}")
        for match in bracket.round_matches(rnd.round_number):
            names = []
            for participant_id in match.participant_ids:
                participant = bracket.get_participant(participant_id)
                if participant is None:
                    names.append("TBD")
                elif is_bye_id(participant_id):
                    names.append("BYE")
                else:
                    names.append(participant.name)
            line = f"{names[0]} vs {names[1]}"
            if match.winner_id:
                line += f" -> {bracket.get_participant(match.winner_id).name}"
            lines.append(line)
    return "\n".join(lines)


def main(argv=None):
    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    parser = argparse.ArgumentParser(description='Create a seeded single elimination bracket.')
    parser.add_argument('participants_file', nargs='?',
                        default=os.path.join(base_dir, 'data', 'participants.yaml'),
                        help='YAML file listing participants in seed order')
    parser.add_argument('--name', default='Tournament', help='Bracket name')
    parser.add_argument('--created-by', default='cli', help='Creator id stored in the bracket')
    parser.add_argument('--output', help='Write the bracket export JSON to this file')
    args = parser.parse_args(argv)

    if not os.path.exists(args.participants_file):
        print(f"Error: {args.participants_file} not found", file=sys.stderr)
        return 1

    participants = load_participants(args.participants_file)
    if len(participants) < 2:
        print(f"At least 2 participants are required. Check {args.participants_file}", file=sys.stderr)
        return 1

    bracket = create_bracket(args.name, participants, args.created_by)
    print(format_bracket(bracket))

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(export_bracket(bracket), f, indent=2)
        print(f"\nBracket written to {args.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
