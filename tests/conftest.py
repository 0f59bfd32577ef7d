import pytest

from flashrep.infrastructure.clock import FixedClock

# 2024-01-01T00:00:00Z in epoch ms
T0 = 1_704_067_200_000


@pytest.fixture
def now():
    return T0


@pytest.fixture
def clock():
    return FixedClock(T0)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config files
    monkeypatch.setenv("HOME", str(home))
    for var in ("FLASHREP_DECK_PATH", "FLASHREP_USER_ID", "FLASHREP_ANALYTICS_BACKEND"):
        monkeypatch.delenv(var, raising=False)
    return home
