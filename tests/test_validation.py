"""
Unit tests for input validation.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.models import bye_team, make_match, make_team, tbd_team
from engine.validation import validate_score, validate_team, validate_tournament_settings


@pytest.fixture
def pair():
    return make_team("North", ["Ana", "Ben"]), make_team("South", ["Cal", "Dee"])


class TestTournamentSettings:
    """Tests for tournament setup checks."""

    def test_valid(self):
        assert validate_tournament_settings("Summer Cup", 8, 2) == []

    def test_blank_name(self):
        assert 'Tournament name is required' in validate_tournament_settings("  ", 8, 2)

    @pytest.mark.parametrize("teams,message", [
        (1, 'At least 2 teams required'),
        (65, 'Maximum 64 teams allowed'),
        ("8", 'Number of teams must be a whole number'),
        (True, 'Number of teams must be a whole number'),
    ])
    def test_team_count(self, teams, message):
        assert validate_tournament_settings("Cup", teams, 1) == [message]

    @pytest.mark.parametrize("groups,message", [
        (0, 'At least 1 group required'),
        (17, 'Maximum 16 groups allowed'),
        (None, 'Number of groups must be a whole number'),
    ])
    def test_group_count(self, groups, message):
        assert validate_tournament_settings("Cup", 8, groups) == [message]

    def test_collects_every_error(self):
        assert len(validate_tournament_settings("", 0, 0)) == 3


class TestTeam:
    """Tests for team checks."""

    def test_valid(self):
        assert validate_team("North", ["Ana", "Ben"]) == []

    def test_missing_name(self):
        assert validate_team("", ["Ana", "Ben"]) == ['Team name is required']

    @pytest.mark.parametrize("players", [["Ana"], ["Ana", "Ben", "Cal"], None, "AnaBen"])
    def test_needs_two_players(self, players):
        assert validate_team("North", players) == ['A team must have exactly two players']

    def test_blank_player(self):
        assert validate_team("North", ["Ana", " "]) == ['Both player names are required']


class TestScore:
    """Tests for score checks."""

    def test_valid_group_score(self, pair):
        assert validate_score(make_match(*pair, 'group'), 21, 15) == []

    @pytest.mark.parametrize("round_name", ['group', 'tiebreaker', 'quarterfinal', 'final'])
    def test_draw_rejected_in_every_round(self, pair, round_name):
        assert validate_score(make_match(*pair, round_name), 3, 3) == ['Draws are not allowed']

    def test_missing_match(self):
        assert validate_score(None, 1, 0) == ['Match not found']

    def test_missing_score(self, pair):
        assert validate_score(make_match(*pair, 'group'), None, 3) == ['Both scores must be filled']

    def test_not_whole_numbers(self, pair):
        assert validate_score(make_match(*pair, 'group'), 2.5, 3) == ['Scores must be whole numbers']

    def test_negative(self, pair):
        assert validate_score(make_match(*pair, 'group'), -1, 3) == ['Scores cannot be negative']

    @pytest.mark.parametrize("placeholder", [tbd_team, bye_team])
    def test_placeholder_side(self, pair, placeholder):
        match = make_match(pair[0], placeholder(), 'semifinal')
        assert validate_score(match, 2, 1) == ['Both teams must be known before a result can be recorded']
