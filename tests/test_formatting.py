"""Tests for formatting module."""
import pytest

from powerplant.formatting import format_multiplier, format_number, format_status
from powerplant.persistence import MemoryBlobStore, PersistenceAdapter
from powerplant.session import GameSession


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, "0"),
        (12.7, "12"),
        (999.9, "999"),
        (1_000, "1.0K"),
        (1_540, "1.5K"),
        (2_500_000, "2.5M"),
        (3_200_000_000, "3.2B"),
        (5e12, "5000.0B"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_multiplier():
    assert format_multiplier(1.0) == "1.0"
    assert format_multiplier(1.5) == "1.5"


def test_format_status():
    session = GameSession.hydrate(PersistenceAdapter(MemoryBlobStore()))
    text = format_status(session.snapshot())
    assert "Power Plant" in text
    assert "Money:      10" in text
    assert "Demand:     50" in text
    assert "Solar Panel" in text
    assert "Prestige available" not in text


def test_format_status_prestige_available():
    session = GameSession.hydrate(PersistenceAdapter(MemoryBlobStore()))
    session.state.lifetime_earned = 100_000
    assert "Prestige available" in format_status(session.snapshot())
