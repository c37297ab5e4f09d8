"""
Winner assignment and bracket progression.

A match can be stored in several places (a tiebreaker lives both in its
group and in the flat match list), so results are written to every copy.
Knockout winners are then moved into their slot in the next round.
"""
import copy
import logging
from typing import Dict, Iterator, List, Optional

from .knockout import bye_winner, is_bye_match, next_round_name
from .models import is_placeholder, is_tbd, now_iso, same_team, tbd_team
from .validation import validate_score

logger = logging.getLogger(__name__)


def _match_lists(tournament: Dict) -> Iterator[List[Dict]]:
    yield tournament.get('matches', [])
    yield tournament.get('knockout_matches', [])
    for group in tournament.get('groups', []):
        yield group.get('matches', [])
        yield group.get('tiebreakers', []) or []


def find_match(tournament: Optional[Dict], match_id: str) -> Optional[Dict]:
    """Look a match up anywhere in the tournament."""
    if not tournament:
        return None
    for matches in _match_lists(tournament):
        for match in matches:
            if match['id'] == match_id:
                return match
    return None


def _winning_side(match: Dict, winner: Optional[Dict]) -> Optional[Dict]:
    if same_team(match['team_a'], winner):
        return match['team_a']
    if same_team(match['team_b'], winner):
        return match['team_b']
    return None


def _set_slot(knockout: List[Dict], index: int) -> None:
    """
    Move the result of knockout[index] into the next round.

    A decided match puts its winner in the next match (even positions fill
    team_a, odd fill team_b); an undecided one puts TBD back. If that changes
    the slot, the next match's old result is stale: it is cleared and the
    clearing carries on down the bracket.
    """
    match = knockout[index]
    next_round = next_round_name(match['round'])
    if next_round is None:
        return

    same_round = [i for i, m in enumerate(knockout) if m['round'] == match['round']]
    position = same_round.index(index)
    next_round_indices = [i for i, m in enumerate(knockout) if m['round'] == next_round]
    if position // 2 >= len(next_round_indices):
        return

    target_index = next_round_indices[position // 2]
    target = knockout[target_index]
    slot = 'team_a' if position % 2 == 0 else 'team_b'
    new_team = copy.deepcopy(match['winner']) if match.get('winner') else tbd_team()
    if same_team(target[slot], new_team):
        return

    target[slot] = new_team
    if target.get('winner') is not None:
        target['winner'] = None
        if 'score_a' in target:
            target['score_a'] = None
            target['score_b'] = None
        _set_slot(knockout, target_index)


def _update_stage(tournament: Dict) -> None:
    final = next((m for m in tournament.get('knockout_matches', []) if m['round'] == 'final'), None)
    if final is not None and final.get('winner'):
        tournament['stage'] = 'completed'
    elif tournament.get('stage') == 'completed':
        tournament['stage'] = 'bracket'


def _apply_result(tournament: Dict, match_id: str, winner: Optional[Dict], fields: Dict) -> Dict:
    updated = copy.deepcopy(tournament)
    for matches in _match_lists(updated):
        for match in matches:
            if match['id'] == match_id:
                match.update(fields)
                side = _winning_side(match, winner) if winner else None
                match['winner'] = copy.deepcopy(side) if side else None

    knockout = updated.get('knockout_matches', [])
    for index, match in enumerate(knockout):
        if match['id'] == match_id:
            _set_slot(knockout, index)
            break

    _update_stage(updated)
    updated['updated_at'] = now_iso()
    return updated


def update_match_winner(tournament: Optional[Dict], match_id: str, winner: Optional[Dict]) -> Optional[Dict]:
    """
    Record (or, with winner=None, clear) the winner of a match.

    Unknown match ids, winners who are not in the match, placeholder
    winners and matches still waiting on an opponent (a TBD side) leave the
    tournament unchanged.
    """
    match = find_match(tournament, match_id)
    if match is None:
        logger.debug("No match %s to update", match_id)
        return tournament
    if winner is not None and (_winning_side(match, winner) is None or is_placeholder(winner)):
        logger.debug("Team %s cannot win match %s", winner.get('id'), match_id)
        return tournament
    if winner is not None and (is_tbd(match['team_a']) or is_tbd(match['team_b'])):
        logger.debug("Match %s is still waiting on an opponent", match_id)
        return tournament
    return _apply_result(tournament, match_id, winner, {})


def update_match_result(tournament: Optional[Dict], match_id: str, score_a, score_b) -> Optional[Dict]:
    """
    Record the score of a match and derive its winner.

    The higher score wins. Scores that fail validation, draws included,
    leave the tournament unchanged.
    """
    match = find_match(tournament, match_id)
    if match is None:
        logger.debug("No match %s to score", match_id)
        return tournament
    errors = validate_score(match, score_a, score_b)
    if errors:
        logger.debug("Rejected score for match %s: %s", match_id, '; '.join(errors))
        return tournament

    winner = match['team_a'] if score_a > score_b else match['team_b']
    return _apply_result(tournament, match_id, winner, {'score_a': score_a, 'score_b': score_b})


def resolve_byes(tournament: Optional[Dict]) -> Optional[Dict]:
    """Give every undecided BYE match to the team facing the BYE."""
    if not tournament:
        return tournament
    bye_match_ids = [
        m['id'] for m in tournament.get('knockout_matches', [])
        if is_bye_match(m) and not m.get('winner')
    ]
    for match_id in bye_match_ids:
        match = find_match(tournament, match_id)
        winner = bye_winner(match)
        if winner is not None:
            tournament = update_match_winner(tournament, match_id, winner)
    return tournament


def champion(tournament: Optional[Dict]) -> Optional[Dict]:
    if not tournament:
        return None
    for match in tournament.get('knockout_matches', []):
        if match['round'] == 'final':
            return match.get('winner')
    return None
