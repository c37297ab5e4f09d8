"""
Tie detection and tiebreaker matches.

Standings are ordered by points only, so level teams are common. A tie only
blocks the knockout stage when it straddles a group's cutoff; the caller
resolves it by playing tiebreaker matches whose wins add a point each.
"""
import copy
import logging
from typing import Dict, List, Optional

from .groups import find_group, group_stage_matches, round_robin_pairs
from .models import TIEBREAKER_ROUND, make_match, now_iso
from .standings import advancing_count, compute_standings, teams_to_advance_per_group

logger = logging.getLogger(__name__)


def find_tied_positions(standings: List[Dict]) -> Dict[int, List[Dict]]:
    """
    Find every cluster of teams level on points.

    Returns {position: [standing, ...]} where position is the 1-based rank
    of the first team of the cluster.
    """
    teams_by_points = {}
    for standing in standings:
        teams_by_points.setdefault(standing['points'], []).append(standing)

    tied_positions = {}
    for tied in teams_by_points.values():
        if len(tied) > 1:
            first_id = tied[0]['team']['id']
            position = next(i for i, s in enumerate(standings) if s['team']['id'] == first_id) + 1
            tied_positions[position] = tied
    return tied_positions


def is_tie_at_cutoff(standings: List[Dict], advancing: int) -> bool:
    """True if the last advancing team is level with the first eliminated one."""
    if advancing < 1 or advancing >= len(standings):
        return False
    return standings[advancing - 1]['points'] == standings[advancing]['points']


def create_tiebreaker_match(tournament: Optional[Dict], group_id: str, team_a: Dict, team_b: Dict,
                            position: Optional[int] = None) -> Optional[Dict]:
    """Append a tiebreaker between two teams of a group."""
    if not tournament or find_group(tournament, group_id) is None:
        logger.debug("No group %s to add a tiebreaker to", group_id)
        return tournament

    match = make_match(copy.deepcopy(team_a), copy.deepcopy(team_b), TIEBREAKER_ROUND, group_id)
    match['is_tiebreaker'] = True
    match['tiebreaker_position'] = position

    groups = []
    for group in tournament['groups']:
        if group['id'] == group_id:
            group = {**group, 'tiebreakers': list(group.get('tiebreakers') or []) + [match]}
        groups.append(group)

    return {
        **tournament,
        'groups': groups,
        'matches': list(tournament.get('matches', [])) + [copy.deepcopy(match)],
        'updated_at': now_iso(),
    }


def create_tiebreakers(tournament: Optional[Dict], group_id: str, teams: List[Dict],
                       position: Optional[int] = None) -> Optional[Dict]:
    """
    Create tiebreakers for a cluster of tied teams.

    Two teams play once; three or more play a mini round robin so every
    tied team can pick up tiebreaker points.
    """
    if len(teams) < 2:
        return tournament
    for team_a, team_b in round_robin_pairs(teams):
        tournament = create_tiebreaker_match(tournament, group_id, team_a, team_b, position)
    return tournament


def all_group_matches_played(tournament: Optional[Dict]) -> bool:
    if not tournament:
        return False
    return all(match.get('winner') for group in tournament.get('groups', []) for match in group['matches'])


def pending_tiebreakers(tournament: Optional[Dict]) -> List[Dict]:
    """Tiebreakers that have been created but not yet decided."""
    if not tournament:
        return []
    return [
        match for match in group_stage_matches(tournament)
        if match.get('is_tiebreaker') and not match.get('winner')
    ]


def groups_tied_at_cutoff(tournament: Optional[Dict]) -> List[Dict]:
    """Groups whose cutoff still falls inside a tie, tiebreaker points included."""
    if not tournament:
        return []
    per_group = teams_to_advance_per_group(tournament)
    tied = []
    for group in tournament.get('groups', []):
        if is_tie_at_cutoff(compute_standings(group), advancing_count(group, per_group)):
            tied.append(group)
    return tied


def group_stage_blockers(tournament: Optional[Dict]) -> List[str]:
    """
    Reasons the group stage cannot be finished yet.

    An empty list means the knockout stage can be generated.
    """
    if not tournament:
        return ['No active tournament.']
    if not tournament.get('groups'):
        return ['Groups have not been generated.']

    blockers = []
    if not all_group_matches_played(tournament):
        blockers.append('All matches must be completed before advancing to the knockout stage.')
    if pending_tiebreakers(tournament):
        blockers.append('All tiebreaker matches must be completed before advancing to the knockout stage.')
    for group in groups_tied_at_cutoff(tournament):
        blockers.append(f"{group['name']} has a tie at the cutoff position; a tiebreaker is required.")
    return blockers


def can_finish_group_stage(tournament: Optional[Dict]) -> bool:
    return not group_stage_blockers(tournament)
