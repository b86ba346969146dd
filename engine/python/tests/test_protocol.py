"""Tests for protocol message parsing."""

import pytest

from api.protocol import CommandRequest, ResetRequest, parse_message


def test_parse_reset():
    """Test reset messages with and without a seed."""
    assert parse_message({"type": "reset"}) == ResetRequest()
    assert parse_message({"type": "reset", "seed": 42}).seed == 42


@pytest.mark.parametrize("seed", [[1, 2], "abc", 1.5, True, {"a": 1}])
def test_reset_rejects_bad_seed(seed):
    """Test non-integer seeds are rejected as invalid messages."""
    with pytest.raises(ValueError):
        parse_message({"type": "reset", "seed": seed})


def test_command_requires_string_action():
    """Test command actions must be strings."""
    assert parse_message({"type": "command", "action": "LEFT"}) == CommandRequest("LEFT")

    with pytest.raises(ValueError):
        parse_message({"type": "command", "action": 3})


def test_unknown_fields_rejected():
    """Test unexpected fields are invalid."""
    with pytest.raises(ValueError):
        parse_message({"type": "reset", "speed": 2})
