"""
Knockout bracket generation from group results.
"""
import copy
import logging
import math
from typing import Callable, Dict, List, Optional, Tuple

from .groups import random_shuffle
from .models import bye_team, is_bye, is_placeholder, make_match, now_iso, tbd_team
from .standings import advancing_count, compute_standings, teams_to_advance_per_group

logger = logging.getLogger(__name__)

# Knockout rounds from earliest to last
ROUND_ORDER = ['round_of_32', 'round_of_16', 'quarterfinal', 'semifinal', 'final']


def get_round_name(teams_in_round: int) -> str:
    """Get the name of a round based on number of teams."""
    if teams_in_round == 2:
        return "final"
    elif teams_in_round == 4:
        return "semifinal"
    elif teams_in_round == 8:
        return "quarterfinal"
    else:
        return f"round_of_{teams_in_round}"


def next_round_name(round_name: str) -> Optional[str]:
    """The round a winner of `round_name` moves on to, None after the final."""
    if round_name not in ROUND_ORDER:
        return None
    index = ROUND_ORDER.index(round_name)
    if index + 1 >= len(ROUND_ORDER):
        return None
    return ROUND_ORDER[index + 1]


def calculate_bracket_size(num_teams: int) -> int:
    """Calculate the bracket size (2, 4, 8, then the next power of 2)."""
    if num_teams < 2:
        return 0
    return 2 ** math.ceil(math.log2(num_teams))


def calculate_byes(num_teams: int) -> int:
    """Calculate number of byes needed."""
    bracket_size = calculate_bracket_size(num_teams)
    return bracket_size - num_teams if bracket_size else 0


def first_round_pairings(bracket_size: int) -> List[Tuple[int, int]]:
    """
    Slot pairings for the opening round.

    Slot i meets slot size-1-i: for 8 teams 0v7, 1v6, 2v5, 3v4; for 4 teams
    0v3, 1v2. BYEs fill the last slots, so each one meets a real team.
    """
    return [(i, bracket_size - 1 - i) for i in range(bracket_size // 2)]


def select_advancing_teams(tournament: Optional[Dict]) -> List[Dict]:
    """Top teams of every group, in group order, tiebreaker points included."""
    if not tournament:
        return []
    per_group = teams_to_advance_per_group(tournament)
    advancing = []
    for group in tournament.get('groups', []):
        standings = compute_standings(group)
        count = advancing_count(group, per_group)
        advancing.extend(copy.deepcopy(s['team']) for s in standings[:count])
    return advancing


def build_bracket(teams: List[Dict]) -> List[Dict]:
    """
    Lay out every knockout match for the given (already shuffled) teams.

    Returns matches ordered by round and, within a round, by bracket
    position. Only the opening round holds real teams; later rounds start
    with TBD slots.
    """
    num_teams = len(teams)
    bracket_size = calculate_bracket_size(num_teams)
    if not bracket_size:
        return []

    slots = list(teams) + [bye_team() for _ in range(calculate_byes(num_teams))]

    matches = []
    first_round = get_round_name(bracket_size)
    for slot_a, slot_b in first_round_pairings(bracket_size):
        matches.append(make_match(slots[slot_a], slots[slot_b], first_round))

    teams_in_round = bracket_size // 2
    while teams_in_round >= 2:
        round_name = get_round_name(teams_in_round)
        for _ in range(teams_in_round // 2):
            matches.append(make_match(tbd_team(), tbd_team(), round_name))
        teams_in_round //= 2

    return matches


def generate_knockout_stage(tournament: Optional[Dict],
                            shuffle: Optional[Callable[[List], List]] = None) -> Optional[Dict]:
    """
    Seed the knockout bracket from the group standings.

    Advancing teams are shuffled again, independently of the group draw, so
    group opponents do not meet on a fixed path. Fewer than two advancing
    teams leaves the tournament unchanged.
    """
    if not tournament:
        return tournament
    advancing = select_advancing_teams(tournament)
    if len(advancing) < 2:
        logger.debug("Not generating knockout stage: %d advancing teams", len(advancing))
        return tournament

    shuffle = shuffle or random_shuffle
    knockout_matches = build_bracket(shuffle(advancing))

    logger.debug("Knockout stage seeded with %d teams (%d byes)", len(advancing), calculate_byes(len(advancing)))
    return {
        **tournament,
        'knockout_matches': knockout_matches,
        'stage': 'bracket',
        'updated_at': now_iso(),
    }


def is_bye_match(match: Dict) -> bool:
    return is_bye(match.get('team_a')) or is_bye(match.get('team_b'))


def bye_winner(match: Dict) -> Optional[Dict]:
    """The side that walks over a BYE; None if the match has no BYE."""
    if is_bye(match.get('team_b')) and not is_placeholder(match.get('team_a')):
        return match['team_a']
    if is_bye(match.get('team_a')) and not is_placeholder(match.get('team_b')):
        return match['team_b']
    return None


def matches_by_round(knockout_matches: List[Dict]) -> Dict[str, List[Dict]]:
    """Knockout matches grouped by round, in bracket order."""
    rounds = {}
    for round_name in ROUND_ORDER:
        round_matches = [m for m in knockout_matches if m['round'] == round_name]
        if round_matches:
            rounds[round_name] = round_matches
    return rounds
