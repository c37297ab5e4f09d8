"""
Input checks for the layers that call the engine.

The engine trusts its inputs; forms, the HTTP API and the CLI run these
first and show the returned messages instead of calling the engine.
"""
from typing import List, Optional

from .models import is_placeholder

MIN_TEAMS = 2
MAX_TEAMS = 64
MIN_GROUPS = 1
MAX_GROUPS = 16


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_tournament_settings(name, number_of_teams, number_of_groups) -> List[str]:
    """Returns a list of error messages, empty when the settings are valid."""
    errors = []
    if _is_blank(name):
        errors.append('Tournament name is required')
    if not _is_int(number_of_teams):
        errors.append('Number of teams must be a whole number')
    elif number_of_teams < MIN_TEAMS:
        errors.append(f'At least {MIN_TEAMS} teams required')
    elif number_of_teams > MAX_TEAMS:
        errors.append(f'Maximum {MAX_TEAMS} teams allowed')
    if not _is_int(number_of_groups):
        errors.append('Number of groups must be a whole number')
    elif number_of_groups < MIN_GROUPS:
        errors.append(f'At least {MIN_GROUPS} group required')
    elif number_of_groups > MAX_GROUPS:
        errors.append(f'Maximum {MAX_GROUPS} groups allowed')
    return errors


def validate_team(name, player_names) -> List[str]:
    """A team needs a name and exactly two named players."""
    errors = []
    if _is_blank(name):
        errors.append('Team name is required')
    if not isinstance(player_names, (list, tuple)) or len(player_names) != 2:
        errors.append('A team must have exactly two players')
    elif any(_is_blank(player) for player in player_names):
        errors.append('Both player names are required')
    return errors


def validate_score(match: Optional[dict], score_a, score_b) -> List[str]:
    """
    Check a score before it is recorded.

    Scoring is win-only, so every match must produce a winner and a level
    score is rejected whatever the round.
    """
    if match is None:
        return ['Match not found']
    errors = []
    if is_placeholder(match.get('team_a')) or is_placeholder(match.get('team_b')):
        errors.append('Both teams must be known before a result can be recorded')
    if score_a is None or score_b is None:
        errors.append('Both scores must be filled')
        return errors
    if not _is_int(score_a) or not _is_int(score_b):
        errors.append('Scores must be whole numbers')
        return errors
    if score_a < 0 or score_b < 0:
        errors.append('Scores cannot be negative')
    elif score_a == score_b:
        errors.append('Draws are not allowed')
    return errors
