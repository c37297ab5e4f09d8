"""
Group standings.

Scoring is win-only: a group win is worth one point. Tiebreaker wins add a
point too but do not count as played or won matches, so they only reorder
teams that were level on points.
"""
import math
from typing import Dict, List, Optional


def compute_standings(group: Dict) -> List[Dict]:
    """
    Calculate the ranked table for one group.

    Returns: [{'team': team, 'played': n, 'wins': n, 'losses': n, 'points': n}, ...]
    sorted by points (desc). Teams level on points keep their draw order.
    """
    team_stats = {}
    for team in group.get('teams', []):
        team_stats[team['id']] = {
            'team': team,
            'played': 0,
            'wins': 0,
            'losses': 0,
            'points': 0,
        }

    for match in group.get('matches', []):
        winner = match.get('winner')
        if not winner:
            continue
        team_a = team_stats.get(match['team_a']['id'])
        team_b = team_stats.get(match['team_b']['id'])
        # Placeholders and teams from other groups never accrue standings
        if team_a is None or team_b is None:
            continue
        team_a['played'] += 1
        team_b['played'] += 1
        if winner['id'] == match['team_a']['id']:
            team_a['wins'] += 1
            team_a['points'] += 1
            team_b['losses'] += 1
        elif winner['id'] == match['team_b']['id']:
            team_b['wins'] += 1
            team_b['points'] += 1
            team_a['losses'] += 1

    for match in group.get('tiebreakers', []) or []:
        winner = match.get('winner')
        if winner and winner['id'] in team_stats:
            team_stats[winner['id']]['points'] += 1

    return sorted(team_stats.values(), key=lambda x: -x['points'])


def compute_all_standings(tournament: Optional[Dict]) -> Dict[str, List[Dict]]:
    """Standings for every group, keyed by group id."""
    if not tournament:
        return {}
    return {group['id']: compute_standings(group) for group in tournament.get('groups', [])}


def teams_to_advance_per_group(tournament: Optional[Dict]) -> int:
    """
    How many teams each group sends to the knockout stage.

    Aims for an 8-team bracket (quarterfinals); if the groups are too small
    for that, falls back to a 4-team bracket (semifinals). At least one team
    always advances from each group.
    """
    if not tournament or not tournament.get('groups'):
        return 0
    number_of_groups = len(tournament['groups'])
    total_teams = len(tournament.get('teams', []))

    per_group = math.ceil(8 / number_of_groups)
    if per_group > total_teams // number_of_groups:
        per_group = math.ceil(4 / number_of_groups)
    return max(1, per_group)


def advancing_count(group: Dict, per_group: int) -> int:
    """Advancing count for one group, capped by the group's size."""
    return min(len(group.get('teams', [])), max(1, per_group))
