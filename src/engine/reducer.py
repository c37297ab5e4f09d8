"""
Single entry point that applies a command to a tournament snapshot.

A command is a dict with a 'type' key plus that command's arguments, e.g.
{'type': 'add_team', 'name': 'Smash Bros', 'players': ['Ana', 'Ben']}.
"""
from typing import Callable, Dict, List, Optional

from .groups import generate_groups
from .knockout import generate_knockout_stage
from .progression import find_match, resolve_byes, update_match_result, update_match_winner
from .tiebreak import create_tiebreaker_match, create_tiebreakers
from .tournament import add_team, create_tournament, finish_group_stage, reset_tournament, update_team


def _resolve_winner(tournament: Optional[Dict], command: Dict) -> Optional[Dict]:
    """Winner given directly as a team, or by id among the match's two teams."""
    if 'winner_id' not in command:
        return command.get('winner')
    winner_id = command['winner_id']
    match = find_match(tournament, command['match_id'])
    if winner_id is None or match is None:
        return None
    for team in (match['team_a'], match['team_b']):
        if team['id'] == winner_id:
            return team
    # Not in the match: passed through so update_match_winner rejects it
    return {'id': winner_id}


def apply_command(tournament: Optional[Dict], command: Dict,
                  shuffle: Optional[Callable[[List], List]] = None) -> Optional[Dict]:
    """
    Apply one command and return the new snapshot.

    Raises ValueError for an unknown command type. Everything else that
    cannot be applied returns the snapshot unchanged.
    """
    command_type = command.get('type')

    if command_type == 'create_tournament':
        return create_tournament(command['name'], command['number_of_teams'], command['number_of_groups'])
    elif command_type == 'add_team':
        return add_team(tournament, command['name'], command['players'])
    elif command_type == 'update_team':
        return update_team(tournament, command['team_id'], command['name'], command['players'])
    elif command_type == 'generate_groups':
        return generate_groups(tournament, shuffle)
    elif command_type == 'set_match_winner':
        return update_match_winner(tournament, command['match_id'], _resolve_winner(tournament, command))
    elif command_type == 'set_match_result':
        return update_match_result(tournament, command['match_id'], command.get('score_a'), command.get('score_b'))
    elif command_type == 'create_tiebreaker':
        return create_tiebreaker_match(tournament, command['group_id'], command['team_a'], command['team_b'],
                                       command.get('position'))
    elif command_type == 'create_tiebreakers':
        return create_tiebreakers(tournament, command['group_id'], command['teams'], command.get('position'))
    elif command_type == 'generate_knockout_stage':
        return generate_knockout_stage(tournament, shuffle)
    elif command_type == 'finish_group_stage':
        return finish_group_stage(tournament, shuffle)
    elif command_type == 'resolve_byes':
        return resolve_byes(tournament)
    elif command_type == 'reset':
        return reset_tournament(tournament)
    raise ValueError(f"Unknown command type: {command_type!r}")
