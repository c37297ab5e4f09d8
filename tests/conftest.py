"""
Shared pytest fixtures for the doubles cup tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.groups import generate_groups
from engine.models import make_team
from engine.tournament import add_team, create_tournament


def keep_order(items):
    """Shuffle stand-in that leaves the order untouched."""
    return list(items)


@pytest.fixture
def identity_shuffle():
    return keep_order


@pytest.fixture
def build_tournament():
    """Factory for a tournament with `num_teams` teams named Team 1..N."""
    def _build(num_teams, num_groups):
        tournament = create_tournament('Test Cup', num_teams, num_groups)
        for i in range(num_teams):
            tournament = add_team(tournament, f"Team {i + 1}", [f"Player {i + 1}A", f"Player {i + 1}B"])
        return tournament
    return _build


@pytest.fixture
def drawn_tournament(build_tournament):
    """Factory for a tournament whose groups are drawn in team order."""
    def _drawn(num_teams, num_groups):
        return generate_groups(build_tournament(num_teams, num_groups), keep_order)
    return _drawn


@pytest.fixture
def sample_teams():
    """Eight standalone teams for bracket tests."""
    return [make_team(f"Seed {i}", [f"S{i}A", f"S{i}B"]) for i in range(8)]


@pytest.fixture
def client():
    """Create a Flask test client."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app's data directory at a temporary folder."""
    import app as app_module
    data_dir = tmp_path / "data"
    monkeypatch.setattr(app_module, 'DATA_DIR', str(data_dir))
    return str(data_dir)
