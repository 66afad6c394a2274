"""Unit tests for the backend JSON wire codec."""

from __future__ import annotations

import json

import pytest

from starwatch.backend.errors import BackendTransportError
from starwatch.backend.wire import (
    decode_create_reply,
    decode_error_reason,
    decode_read_reply,
    decode_uuid_reply,
    encode_setting_args,
)
from starwatch.tracking.models import ReadErr, ReadOk
from tests.helpers import make_setting


def _wire_entry(setting_id: str, order: int, stars: int) -> dict[str, object]:
    return {
        "setting": {
            "id": setting_id,
            "order": order,
            "favourite": False,
            "repo": {"git_type": "GitHub", "owner": "octo", "name": setting_id},
        },
        "stars": stars,
    }


def test_encode_setting_args_wraps_setting() -> None:
    """Command arguments are a ``setting`` object with wire field names."""
    body = json.loads(encode_setting_args(make_setting("u1", 4, favourite=True)))
    assert body == {
        "setting": {
            "id": "u1",
            "order": 4,
            "favourite": True,
            "repo": {"git_type": "GitHub", "owner": "octo", "name": "u1"},
        }
    }


def test_decode_read_reply_keeps_errors_in_position() -> None:
    """Ok and Err results decode in order."""
    payload = json.dumps(
        [
            {"Ok": _wire_entry("x", 0, 5)},
            {"Err": "bad"},
            {"Ok": _wire_entry("y", 1, 6)},
        ]
    ).encode()

    results = decode_read_reply(payload)

    assert isinstance(results[0], ReadOk)
    assert results[0].value.setting.id == "x"
    assert results[1] == ReadErr("bad")
    assert isinstance(results[2], ReadOk)
    assert results[2].value.stars == 6


@pytest.mark.parametrize(
    "item",
    [
        {"Ok": {"setting": {"id": "x"}, "stars": 1}},
        {"Ok": {**_wire_entry("x", 0, 1), "stars": "many"}},
        {"Maybe": 1},
        "Ok",
    ],
    ids=["missing-fields", "wrong-type", "unknown-key", "not-an-object"],
)
def test_decode_read_reply_turns_bad_entries_into_errors(item: object) -> None:
    """A malformed entry becomes ReadErr instead of failing the read."""
    payload = json.dumps([item, {"Ok": _wire_entry("y", 1, 2)}]).encode()

    results = decode_read_reply(payload)

    assert isinstance(results[0], ReadErr)
    assert isinstance(results[1], ReadOk)


def test_decode_read_reply_rejects_non_list() -> None:
    """A read reply that is not a list is a transport error."""
    with pytest.raises(BackendTransportError, match="read"):
        decode_read_reply(b'{"Ok": []}')


def test_decode_uuid_reply() -> None:
    """uuid replies are JSON strings and must not be empty."""
    assert decode_uuid_reply(b'"abc-123"') == "abc-123"
    with pytest.raises(BackendTransportError, match="empty identifier"):
        decode_uuid_reply(b'""')


def test_decode_create_reply_requires_non_negative_int() -> None:
    """create replies carry a non-negative star count."""
    assert decode_create_reply(b"42") == 42
    with pytest.raises(BackendTransportError, match="create"):
        decode_create_reply(b"-1")
    with pytest.raises(BackendTransportError, match="create"):
        decode_create_reply(b'"42"')


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        (b'{"error": "repository not found"}', "repository not found"),
        (b'"Not Found"', "Not Found"),
        (b"<html>oops</html>", None),
        (b"", None),
    ],
)
def test_decode_error_reason(payload: bytes, expected: str | None) -> None:
    """Reasons come from an error object or a bare string."""
    assert decode_error_reason(payload) == expected
