"""
Flask JSON API for the doubles cup.

Holds the single live tournament in a YAML file and turns each request into
an engine command.
"""
import os
import yaml
from filelock import FileLock
from flask import Flask, jsonify, request
from engine.groups import find_group
from engine.progression import champion, find_match
from engine.reducer import apply_command
from engine.standings import advancing_count, compute_all_standings, teams_to_advance_per_group
from engine.tiebreak import find_tied_positions, group_stage_blockers, is_tie_at_cutoff
from engine.tournament import teams_needed
from engine.validation import validate_score, validate_team, validate_tournament_settings

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
TOURNAMENT_FILENAME = 'tournament.yaml'
LOCK_TIMEOUT = 10

app.secret_key = os.environ.get('SECRET_KEY') or os.urandom(24)


def _tournament_file() -> str:
    return os.path.join(DATA_DIR, TOURNAMENT_FILENAME)


def _data_lock() -> FileLock:
    os.makedirs(DATA_DIR, exist_ok=True)
    return FileLock(os.path.join(DATA_DIR, '.lock'), timeout=LOCK_TIMEOUT)


def _convert_to_serializable(obj):
    """Convert tuples to lists recursively and drop shared references for YAML."""
    if isinstance(obj, dict):
        return {k: _convert_to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_convert_to_serializable(item) for item in obj]
    else:
        return obj


def load_tournament():
    """Load the live tournament from YAML, None if there is none."""
    path = _tournament_file()
    if not os.path.exists(path):
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        app.logger.warning(f'Failed to parse {path}: {e}')
        return None
    return data or None


def save_tournament(tournament):
    """Save the live tournament to YAML; None removes the file."""
    path = _tournament_file()
    if tournament is None:
        if os.path.exists(path):
            os.remove(path)
        return
    os.makedirs(DATA_DIR, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(_convert_to_serializable(tournament), f, default_flow_style=False)


class RequestError(Exception):
    """A rejected request, answered with a JSON error and a status code."""

    def __init__(self, message, status_code=400, **extra):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.extra = extra


def _apply(prepare):
    """
    Load, apply one command and save, holding the data lock throughout.

    `prepare` is either a command dict or a callable that checks the loaded
    tournament and returns the command, raising RequestError to reject it.
    Checks therefore see the same snapshot the command is applied to.
    """
    with _data_lock():
        tournament = load_tournament()
        command = prepare(tournament) if callable(prepare) else prepare
        updated = apply_command(tournament, command)
        if updated is not tournament:
            save_tournament(updated)
    return tournament, updated


def _require_tournament(tournament):
    if tournament is None:
        raise RequestError('No active tournament', 404)


def _require_match(tournament, match_id):
    _require_tournament(tournament)
    match = find_match(tournament, match_id)
    if match is None:
        raise RequestError('Match not found', 404)
    return match


def _parse_int(value):
    if isinstance(value, bool):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return value


def _tournament_view(tournament):
    """Snapshot plus the derived data a client needs to render it."""
    per_group = teams_to_advance_per_group(tournament)
    standings = compute_all_standings(tournament)
    groups = {}
    for group in tournament.get('groups', []):
        group_standings = standings[group['id']]
        advancing = advancing_count(group, per_group)
        groups[group['id']] = {
            'standings': group_standings,
            'advancing_count': advancing,
            'tied_positions': find_tied_positions(group_standings),
            'tie_at_cutoff': is_tie_at_cutoff(group_standings, advancing),
        }
    return {
        'tournament': tournament,
        'teams_needed': teams_needed(tournament),
        'teams_to_advance_per_group': per_group,
        'groups': groups,
        'blockers': group_stage_blockers(tournament) if tournament.get('stage') == 'groups' else [],
        'champion': champion(tournament),
    }


@app.errorhandler(RequestError)
def handle_request_error(e):
    return jsonify({'error': e.message, **e.extra}), e.status_code


@app.errorhandler(ValueError)
def handle_bad_command(e):
    app.logger.warning(f'Rejected command: {e}')
    return jsonify({'error': str(e)}), 400


@app.route('/api/tournament', methods=['GET'])
def api_get_tournament():
    tournament = load_tournament()
    if tournament is None:
        return jsonify({'tournament': None})
    return jsonify(_tournament_view(tournament))


@app.route('/api/tournament', methods=['POST'])
def api_create_tournament():
    """Create a new tournament, replacing any existing one."""
    data = request.get_json(silent=True) or {}
    name = data.get('name', '')
    number_of_teams = _parse_int(data.get('number_of_teams'))
    number_of_groups = _parse_int(data.get('number_of_groups'))

    errors = validate_tournament_settings(name, number_of_teams, number_of_groups)
    if errors:
        return jsonify({'error': errors[0], 'errors': errors}), 400

    _, tournament = _apply({
        'type': 'create_tournament',
        'name': name.strip(),
        'number_of_teams': number_of_teams,
        'number_of_groups': number_of_groups,
    })
    app.logger.info(f"Created tournament {tournament['name']!r} ({number_of_teams} teams, {number_of_groups} groups)")
    return jsonify({'success': True, 'tournament': tournament}), 201


@app.route('/api/teams', methods=['POST'])
def api_add_team():
    data = request.get_json(silent=True) or {}
    name = data.get('name', '')
    players = data.get('players')

    errors = validate_team(name, players)
    if errors:
        return jsonify({'error': errors[0], 'errors': errors}), 400

    def prepare(tournament):
        _require_tournament(tournament)
        return {'type': 'add_team', 'name': name.strip(), 'players': [p.strip() for p in players]}

    _, tournament = _apply(prepare)
    return jsonify({'success': True, 'team': tournament['teams'][-1]}), 201


@app.route('/api/teams/<team_id>', methods=['POST'])
def api_update_team(team_id):
    data = request.get_json(silent=True) or {}
    name = data.get('name', '')
    players = data.get('players')

    errors = validate_team(name, players)
    if errors:
        return jsonify({'error': errors[0], 'errors': errors}), 400

    def prepare(tournament):
        _require_tournament(tournament)
        if not any(team['id'] == team_id for team in tournament.get('teams', [])):
            raise RequestError('Team not found', 404)
        return {
            'type': 'update_team',
            'team_id': team_id,
            'name': name.strip(),
            'players': [p.strip() for p in players],
        }

    _, tournament = _apply(prepare)
    team = next(t for t in tournament['teams'] if t['id'] == team_id)
    return jsonify({'success': True, 'team': team})


@app.route('/api/groups/generate', methods=['POST'])
def api_generate_groups():
    """Draw the groups. Drawing again restarts the group stage."""
    def prepare(tournament):
        _require_tournament(tournament)
        if len(tournament.get('teams', [])) < 2:
            raise RequestError('You need at least 2 teams to start the tournament.')
        return {'type': 'generate_groups'}

    _, tournament = _apply(prepare)
    app.logger.info(f"Drew {len(tournament['groups'])} groups with {len(tournament['matches'])} matches")
    return jsonify({'success': True, 'tournament': tournament})


@app.route('/api/matches/<match_id>/winner', methods=['POST'])
def api_set_winner(match_id):
    """Set the winner of a match by team id; a null winner_id clears it."""
    data = request.get_json(silent=True) or {}
    if 'winner_id' not in data:
        return jsonify({'error': 'Missing winner_id'}), 400
    winner_id = data['winner_id']

    def prepare(tournament):
        match = _require_match(tournament, match_id)
        if winner_id is not None and winner_id not in (match['team_a']['id'], match['team_b']['id']):
            raise RequestError('Winner must be one of the teams in the match')
        return {'type': 'set_match_winner', 'match_id': match_id, 'winner_id': winner_id}

    previous, tournament = _apply(prepare)
    if tournament is previous:
        return jsonify({'error': 'Winner cannot be set for this match yet'}), 409
    return jsonify({'success': True, 'match': find_match(tournament, match_id), 'stage': tournament['stage']})


@app.route('/api/matches/<match_id>/result', methods=['POST'])
def api_set_result(match_id):
    """Record a score; the winner follows from it."""
    data = request.get_json(silent=True) or {}
    score_a = _parse_int(data.get('score_a'))
    score_b = _parse_int(data.get('score_b'))

    def prepare(tournament):
        match = _require_match(tournament, match_id)
        errors = validate_score(match, score_a, score_b)
        if errors:
            raise RequestError(errors[0], errors=errors)
        return {'type': 'set_match_result', 'match_id': match_id, 'score_a': score_a, 'score_b': score_b}

    _, tournament = _apply(prepare)
    return jsonify({'success': True, 'match': find_match(tournament, match_id), 'stage': tournament['stage']})


@app.route('/api/groups/<group_id>/tiebreakers', methods=['POST'])
def api_create_tiebreakers(group_id):
    """Create tiebreakers among the listed teams of a group."""
    data = request.get_json(silent=True) or {}
    team_ids = data.get('team_ids') or []

    def prepare(tournament):
        _require_tournament(tournament)
        group = find_group(tournament, group_id)
        if group is None:
            raise RequestError('Group not found', 404)
        teams_by_id = {team['id']: team for team in group['teams']}
        teams = [teams_by_id[team_id] for team_id in team_ids if team_id in teams_by_id]
        if len(teams) < 2 or len(teams) != len(team_ids):
            raise RequestError('A tiebreaker needs at least two teams from the group')
        return {
            'type': 'create_tiebreakers',
            'group_id': group_id,
            'teams': teams,
            'position': _parse_int(data.get('position')),
        }

    _, tournament = _apply(prepare)
    group = find_group(tournament, group_id)
    created = group['tiebreakers'][-(len(team_ids) * (len(team_ids) - 1) // 2):]
    app.logger.info(f"Created {len(created)} tiebreaker match(es) in {group['name']}")
    return jsonify({'success': True, 'tiebreakers': created}), 201


@app.route('/api/knockout/generate', methods=['POST'])
def api_generate_knockout():
    """Finish the group stage and seed the bracket."""
    def prepare(tournament):
        _require_tournament(tournament)
        blockers = group_stage_blockers(tournament)
        if blockers:
            raise RequestError(blockers[0], 409, blockers=blockers)
        return {'type': 'finish_group_stage'}

    previous, tournament = _apply(prepare)
    if tournament is previous:
        return jsonify({'error': 'Not enough teams advance to build a bracket'}), 409
    app.logger.info(f"Knockout stage generated with {len(tournament['knockout_matches'])} matches")
    return jsonify({'success': True, 'tournament': tournament})


@app.route('/api/reset', methods=['POST'])
def api_reset():
    """Discard the live tournament."""
    _apply({'type': 'reset'})
    return jsonify({'success': True})


if __name__ == '__main__':
    app.run(debug=True)
