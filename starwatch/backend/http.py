"""HTTP adapter for the backend command interface."""

from __future__ import annotations

import typing as typ

import httpx

from starwatch.backend.errors import BackendCommandError, BackendTransportError
from starwatch.backend.wire import (
    decode_create_reply,
    decode_error_reason,
    decode_read_reply,
    decode_uuid_reply,
    encode_no_args,
    encode_setting_args,
)
from starwatch.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    from starwatch.backend.config import BackendConfig
    from starwatch.tracking.models import ReadResult, TrackedSetting

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_SERVER_ERROR_THRESHOLD = 500


class HttpCommandBackend:
    """Invoke backend commands with ``POST {base_url}/{command}``.

    Arguments are sent as a JSON object. A 2xx reply carries the command's
    result. A 4xx reply is a rejection whose body holds the reason; it is
    raised as :class:`BackendCommandError`. Anything else becomes a
    :class:`BackendTransportError`.

    Parameters
    ----------
    config
        Base URL and timeout.
    http_client
        Optional ``httpx.AsyncClient`` for testing. When omitted the backend
        creates and owns its own client.

    """

    def __init__(
        self,
        config: BackendConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the adapter with configuration."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    @property
    def config(self) -> BackendConfig:
        """Read-only access to the adapter configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def read(self) -> list[ReadResult]:
        """Invoke ``read`` and decode per-entry results."""
        payload = await self._invoke("read", encode_no_args())
        return decode_read_reply(payload)

    async def uuid(self) -> str:
        """Invoke ``uuid`` and return the new identifier."""
        payload = await self._invoke("uuid", encode_no_args())
        return decode_uuid_reply(payload)

    async def create(self, setting: TrackedSetting) -> int:
        """Invoke ``create`` and return the initial star count."""
        payload = await self._invoke("create", encode_setting_args(setting))
        return decode_create_reply(payload)

    async def update(self, setting: TrackedSetting) -> None:
        """Invoke ``update``; the reply payload is ignored."""
        await self._invoke("update", encode_setting_args(setting))

    async def delete(self, setting: TrackedSetting) -> None:
        """Invoke ``delete``; the reply payload is ignored."""
        await self._invoke("delete", encode_setting_args(setting))

    async def _invoke(self, command: str, body: bytes) -> bytes:
        response = await self._send(command, body)
        self._check_response(command, response)
        log_debug(
            logger,
            "backend command=%s status=%d bytes=%d",
            command,
            response.status_code,
            len(response.content),
        )
        return response.content

    async def _send(self, command: str, body: bytes) -> httpx.Response:
        try:
            return await self._client.post(
                f"{self._config.base_url}/{command}",
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as exc:
            raise BackendTransportError.timeout(command) from exc
        except httpx.RequestError as exc:
            raise BackendTransportError.network_error(command, str(exc)) from exc

    def _check_response(self, command: str, response: httpx.Response) -> None:
        status = response.status_code
        if status < _HTTP_ERROR_STATUS_THRESHOLD:
            return

        reason = decode_error_reason(response.content)
        if status < _HTTP_SERVER_ERROR_THRESHOLD and reason is not None:
            raise BackendCommandError(command, reason)
        raise BackendTransportError.http_error(command, status)
