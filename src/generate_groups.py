"""
Draw groups for a doubles cup and print the round-robin fixtures.

Usage:
    python src/generate_groups.py teams.yaml --groups 2
    python src/generate_groups.py teams.yaml --groups 2 --seed 7

teams.yaml maps each team name to its two players:

    Smash Bros: [Ana, Ben]
    Net Ninjas: [Cal, Dee]
"""
import argparse
import random
import sys
import yaml
from engine.groups import generate_groups
from engine.tournament import add_team, create_tournament
from engine.validation import validate_team, validate_tournament_settings


def load_teams(file_path):
    """
    Load {team name: [player, player]} from YAML; returns a list of (name, players).

    Raises ValueError when the file is not a mapping of team names.
    """
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{file_path} must map team names to their two players")
    return [(str(name), players) for name, players in data.items()]


def build_tournament(teams, number_of_groups, rng=None):
    """Create a tournament with the given teams and draw its groups."""
    tournament = create_tournament('Doubles Cup', len(teams), number_of_groups)
    for name, players in teams:
        tournament = add_team(tournament, name, players)
    shuffle = (lambda items: rng.sample(items, len(items))) if rng else None
    return generate_groups(tournament, shuffle)


def format_fixtures(tournament):
    """Fixture lines: a '# Group X' header per group, then 'A vs B' per match."""
    lines = []
    for group in tournament['groups']:
        if lines:
            lines.append('')
        lines.append(f"# {group['name']}")
        for match in group['matches']:
            lines.append(f"{match['team_a']['name']} vs {match['team_b']['name']}")
    return lines


def main(argv=None):
    parser = argparse.ArgumentParser(description='Draw groups and print round-robin fixtures.')
    parser.add_argument('teams_file', help='YAML file mapping team name to two player names')
    parser.add_argument('--groups', type=int, default=1, help='number of groups (default: 1)')
    parser.add_argument('--seed', type=int, default=None, help='seed for a reproducible draw')
    args = parser.parse_args(argv)

    try:
        teams = load_teams(args.teams_file)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    errors = validate_tournament_settings('Doubles Cup', len(teams), args.groups)
    for name, players in teams:
        errors.extend(f"{name}: {error}" for error in validate_team(name, players))
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    rng = random.Random(args.seed) if args.seed is not None else None
    tournament = build_tournament(teams, args.groups, rng)
    print('\n'.join(format_fixtures(tournament)))
    return 0


if __name__ == '__main__':
    sys.exit(main())
