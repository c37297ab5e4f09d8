"""
Group draw and round-robin fixture generation.
"""
import copy
import logging
import math
import random
from typing import Callable, Dict, List, Optional, Tuple

from .models import GROUP_ROUND, make_group, make_match, now_iso

logger = logging.getLogger(__name__)

Shuffle = Callable[[List], List]


def random_shuffle(items: List) -> List:
    """Return a uniformly shuffled copy of `items`."""
    return random.sample(items, len(items))


def round_robin_pairs(teams: List) -> List[Tuple]:
    """Every unordered pair of `teams` exactly once, in draw order."""
    pairs = []
    num_teams = len(teams)
    for i in range(num_teams):
        for j in range(i + 1, num_teams):
            pairs.append((teams[i], teams[j]))
    return pairs


def partition_teams(teams: List[Dict], number_of_groups: int) -> List[List[Dict]]:
    """
    Split teams into `number_of_groups` contiguous chunks.

    Chunk size is ceil(len(teams) / number_of_groups), so the last chunks
    can be short and, for some counts, empty (e.g. 5 teams into 4 groups
    gives sizes 2, 2, 1, 0).
    """
    per_group = math.ceil(len(teams) / number_of_groups)
    return [teams[i * per_group:(i + 1) * per_group] for i in range(number_of_groups)]


def generate_groups(tournament: Optional[Dict], shuffle: Optional[Shuffle] = None) -> Optional[Dict]:
    """
    Draw the group stage.

    Teams are shuffled, chunked into groups and stamped with their group id;
    each group gets a full round robin. Calling this again discards the
    previous draw, tiebreakers and bracket.
    """
    if not tournament:
        return tournament
    teams = tournament.get('teams', [])
    number_of_groups = tournament.get('number_of_groups', 0)
    if len(teams) < 2 or number_of_groups < 1:
        logger.debug("Not drawing groups: %d teams, %d groups", len(teams), number_of_groups)
        return tournament

    shuffle = shuffle or random_shuffle
    shuffled = shuffle([copy.deepcopy(team) for team in teams])

    groups = []
    for index, chunk in enumerate(partition_teams(shuffled, number_of_groups)):
        group_id = f"group-{index + 1}"
        group_teams = [{**team, 'group_id': group_id} for team in chunk]
        group_matches = [
            make_match(copy.deepcopy(team_a), copy.deepcopy(team_b), GROUP_ROUND, group_id)
            for team_a, team_b in round_robin_pairs(group_teams)
        ]
        groups.append(make_group(index, group_teams, group_matches))

    all_matches = [copy.deepcopy(match) for group in groups for match in group['matches']]
    group_of = {team['id']: group['id'] for group in groups for team in group['teams']}
    stamped_teams = [{**copy.deepcopy(team), 'group_id': group_of[team['id']]} for team in teams]

    logger.debug("Drew %d teams into %d groups", len(teams), len(groups))
    return {
        **tournament,
        'teams': stamped_teams,
        'groups': groups,
        'matches': all_matches,
        'knockout_matches': [],
        'stage': 'groups',
        'updated_at': now_iso(),
    }


def group_stage_matches(tournament: Optional[Dict]) -> List[Dict]:
    """All group and tiebreaker matches, read from the groups themselves."""
    if not tournament:
        return []
    matches = []
    for group in tournament.get('groups', []):
        matches.extend(group.get('matches', []))
        matches.extend(group.get('tiebreakers', []) or [])
    return matches


def find_group(tournament: Optional[Dict], group_id: str) -> Optional[Dict]:
    if not tournament:
        return None
    for group in tournament.get('groups', []):
        if group['id'] == group_id:
            return group
    return None
