import pytest

from tests.fakes import FakeClock, FakePage, fake_expect


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_page(clock, monkeypatch) -> FakePage:
    """A fake page whose failed waits advance ``clock`` by their timeout."""
    monkeypatch.setattr("mercury_qa.actions.conditions.expect", fake_expect)
    return FakePage(clock=clock)
