"""
Tournament lifecycle: creation, team setup, finishing the group stage, reset.
"""
import logging
from typing import Callable, Dict, List, Optional

from .knockout import generate_knockout_stage
from .models import make_team, make_tournament, now_iso
from .progression import resolve_byes
from .tiebreak import group_stage_blockers

logger = logging.getLogger(__name__)


def create_tournament(name: str, number_of_teams: int, number_of_groups: int) -> Dict:
    return make_tournament(name, number_of_teams, number_of_groups)


def add_team(tournament: Optional[Dict], name: str, player_names) -> Optional[Dict]:
    if not tournament:
        return tournament
    team = make_team(name, player_names)
    return {
        **tournament,
        'teams': list(tournament.get('teams', [])) + [team],
        'updated_at': now_iso(),
    }


def update_team(tournament: Optional[Dict], team_id: str, name: str, player_names) -> Optional[Dict]:
    """Rename a team and its players; every id is kept."""
    if not tournament or not any(team['id'] == team_id for team in tournament.get('teams', [])):
        logger.debug("No team %s to update", team_id)
        return tournament

    teams = []
    for team in tournament['teams']:
        if team['id'] == team_id:
            first, second = team['players']
            team = {
                **team,
                'name': name,
                'players': [
                    {'id': first['id'], 'name': player_names[0]},
                    {'id': second['id'], 'name': player_names[1]},
                ],
            }
        teams.append(team)
    return {**tournament, 'teams': teams, 'updated_at': now_iso()}


def teams_needed(tournament: Optional[Dict]) -> int:
    """How many more teams the tournament was set up for."""
    if not tournament:
        return 0
    return max(0, tournament.get('number_of_teams', 0) - len(tournament.get('teams', [])))


def finish_group_stage(tournament: Optional[Dict],
                       shuffle: Optional[Callable[[List], List]] = None) -> Optional[Dict]:
    """
    Move from the group stage to the knockout bracket.

    Does nothing while any group match or tiebreaker is undecided or a
    cutoff tie remains. BYE matches are decided straight away.
    """
    blockers = group_stage_blockers(tournament)
    if blockers:
        logger.debug("Group stage not finished: %s", ' '.join(blockers))
        return tournament
    return resolve_byes(generate_knockout_stage(tournament, shuffle))


def reset_tournament(tournament: Optional[Dict]) -> None:
    return None
