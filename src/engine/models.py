"""
Entity records for the doubles tournament.

Every record is a plain dict so a tournament snapshot can be dumped to YAML
or JSON verbatim.
"""
import uuid
from datetime import datetime
from typing import Dict, List, Optional

TBD_ID = 'tbd'
TBD_NAME = 'TBD'
BYE_NAME = 'BYE'
PLACEHOLDER_PREFIX = 'tbd-'

GROUP_ROUND = 'group'
TIEBREAKER_ROUND = 'tiebreaker'

STAGES = ('setup', 'teams', 'groups', 'bracket', 'completed')


def generate_id() -> str:
    return str(uuid.uuid4())


def now_iso() -> str:
    return datetime.now().isoformat()


def make_player(name: str, player_id: Optional[str] = None) -> Dict:
    return {'id': player_id or generate_id(), 'name': name}


def make_team(name: str, player_names, team_id: Optional[str] = None) -> Dict:
    """Create a team with exactly two players."""
    first, second = player_names
    return {
        'id': team_id or generate_id(),
        'name': name,
        'players': [make_player(first), make_player(second)],
    }


def tbd_team() -> Dict:
    """Placeholder for a slot waiting on an earlier-round winner."""
    return {
        'id': TBD_ID,
        'name': TBD_NAME,
        'players': [{'id': TBD_ID, 'name': TBD_NAME}, {'id': TBD_ID, 'name': TBD_NAME}],
    }


def bye_team() -> Dict:
    """Placeholder opponent used to pad a bracket; always loses."""
    bye_id = f"{PLACEHOLDER_PREFIX}{generate_id()}"
    return {
        'id': bye_id,
        'name': BYE_NAME,
        'players': [{'id': f"{bye_id}-1", 'name': BYE_NAME}, {'id': f"{bye_id}-2", 'name': BYE_NAME}],
    }


def is_placeholder(team: Optional[Dict]) -> bool:
    """True for TBD and BYE slots, which are never real teams."""
    if not team:
        return True
    team_id = team.get('id', '')
    return team_id == TBD_ID or team_id.startswith(PLACEHOLDER_PREFIX)


def is_bye(team: Optional[Dict]) -> bool:
    return bool(team) and team.get('name') == BYE_NAME and is_placeholder(team)


def is_tbd(team: Optional[Dict]) -> bool:
    return bool(team) and team.get('id') == TBD_ID


def make_match(team_a: Dict, team_b: Dict, round_name: str, group_id: Optional[str] = None) -> Dict:
    match = {
        'id': generate_id(),
        'team_a': team_a,
        'team_b': team_b,
        'winner': None,
        'round': round_name,
    }
    if group_id is not None:
        match['group_id'] = group_id
    return match


def make_group(index: int, teams: List[Dict], matches: List[Dict]) -> Dict:
    """Group number `index` (0-based) is `group-<index+1>`, named Group A, B, ..."""
    return {
        'id': f"group-{index + 1}",
        'name': f"Group {chr(65 + index)}",
        'teams': teams,
        'matches': matches,
        'tiebreakers': [],
    }


def make_tournament(name: str, number_of_teams: int, number_of_groups: int) -> Dict:
    timestamp = now_iso()
    return {
        'id': generate_id(),
        'name': name,
        'number_of_teams': number_of_teams,
        'number_of_groups': number_of_groups,
        'teams': [],
        'groups': [],
        'matches': [],
        'knockout_matches': [],
        'stage': 'teams',
        'created_at': timestamp,
        'updated_at': timestamp,
    }


def same_team(first: Optional[Dict], second: Optional[Dict]) -> bool:
    if first is None or second is None:
        return first is second
    return first.get('id') == second.get('id')
