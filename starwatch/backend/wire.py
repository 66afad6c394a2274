"""JSON wire codec for backend command requests and replies.

Settings travel with the field names the backend uses::

    {"id": "...", "order": 0, "favourite": false,
     "repo": {"git_type": "GitHub", "owner": "octo", "name": "cat"}}

A ``read`` reply is a list of per-entry results, each either
``{"Ok": {"setting": ..., "stars": 42}}`` or ``{"Err": "message"}``. An
entry whose ``Ok`` payload does not decode is reported as a ``ReadErr`` so a
single bad record never fails the whole read.
"""

from __future__ import annotations

import typing as typ

import msgspec

from starwatch.backend.errors import BackendTransportError
from starwatch.tracking.models import (
    FetchedEntry,
    ReadErr,
    ReadOk,
    ReadResult,
    TrackedSetting,
)

_StarCount = typ.Annotated[int, msgspec.Meta(ge=0)]

_OK_KEY = "Ok"
_ERR_KEY = "Err"


class _ErrorBody(msgspec.Struct):
    error: str


def encode_setting_args(setting: TrackedSetting) -> bytes:
    """Encode the ``{"setting": ...}`` argument object for a command."""
    return msgspec.json.encode({"setting": setting})


def encode_no_args() -> bytes:
    """Encode an empty argument object."""
    return b"{}"


def _decode_read_item(item: object) -> ReadResult:
    if not isinstance(item, dict):
        return ReadErr(f"malformed read result: {item!r}")
    if _OK_KEY in item:
        try:
            return ReadOk(msgspec.convert(item[_OK_KEY], FetchedEntry))
        except msgspec.ValidationError as exc:
            return ReadErr(f"undecodable entry: {exc}")
    if _ERR_KEY in item:
        return ReadErr(str(item[_ERR_KEY]))
    return ReadErr(f"malformed read result: {item!r}")


def decode_read_reply(payload: bytes) -> list[ReadResult]:
    """Decode a ``read`` reply into per-entry results.

    Raises
    ------
    BackendTransportError
        If the reply is not a JSON list.

    """
    try:
        items = msgspec.json.decode(payload, type=list[typ.Any])
    except msgspec.DecodeError as exc:
        raise BackendTransportError.invalid_payload("read", str(exc)) from exc
    return [_decode_read_item(item) for item in items]


def decode_uuid_reply(payload: bytes) -> str:
    """Decode the identifier returned by ``uuid``."""
    try:
        value = msgspec.json.decode(payload, type=str)
    except msgspec.DecodeError as exc:
        raise BackendTransportError.invalid_payload("uuid", str(exc)) from exc
    if not value:
        raise BackendTransportError.invalid_payload("uuid", "empty identifier")
    return value


def decode_create_reply(payload: bytes) -> int:
    """Decode the star count returned by ``create``."""
    try:
        return msgspec.json.decode(payload, type=_StarCount)
    except msgspec.DecodeError as exc:
        raise BackendTransportError.invalid_payload("create", str(exc)) from exc


def decode_error_reason(payload: bytes) -> str | None:
    """Extract the backend's failure reason from an error reply.

    Accepts either ``{"error": "..."}`` or a bare JSON string. Returns
    ``None`` when neither shape matches.
    """
    for shape in (_ErrorBody, str):
        try:
            decoded = msgspec.json.decode(payload, type=shape)
        except msgspec.DecodeError:
            continue
        return decoded.error if isinstance(decoded, _ErrorBody) else decoded
    return None
