"""Room session client.

Creates, joins and leaves rooms on the room service and hands back the
descriptor the media engine needs. Requests run on background asyncio tasks;
each create/join outcome is delivered once, through the optional completion
callback and by awaiting the returned ``RoomCall``."""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Coroutine, Generator, Sequence
from urllib.parse import quote
from uuid import uuid4

import httpx
from pydantic import BaseModel

from ..core.config import Settings, get_settings
from ..schemas.rooms import (
    CreateRoomRequest,
    JoinRoomRequest,
    LeaveRoomRequest,
    RoomDescriptor,
    parse_room_descriptor,
)
from .errors import (
    MalformedResponseError,
    NetworkUnreachableError,
    RequestCancelledError,
    RequestTimeoutError,
    RoomClientError,
    ServerError,
)

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[RoomDescriptor | None, RoomClientError | None], Awaitable[None] | None]
RequestFactory = Callable[[], Coroutine[Any, Any, RoomDescriptor]]
TrackCallable = Callable[["asyncio.Future[Any]"], None]


@dataclass(frozen=True, slots=True)
class RoomResult:
    """Outcome of a create or join request; exactly one field is set."""

    descriptor: RoomDescriptor | None = None
    error: RoomClientError | None = None

    @property
    def ok(self) -> bool:
        return self.descriptor is not None


class RoomCall:
    """Handle for an in-flight create or join request.

    Awaiting the handle yields a ``RoomResult`` and never raises a
    ``RoomClientError``. ``cancel()`` abandons the request; the outcome then
    carries ``RequestCancelledError`` so a late response is never delivered.
    """

    def __init__(
        self,
        operation: str,
        request: RequestFactory,
        on_complete: CompletionHandler | None,
        track: TrackCallable,
    ) -> None:
        loop = asyncio.get_running_loop()
        self.operation = operation
        self._on_complete = on_complete
        self._track = track
        self._outcome: asyncio.Future[RoomResult] = loop.create_future()
        self._task = loop.create_task(request())
        self._task.add_done_callback(self._settle)
        track(self._task)

    def cancel(self) -> bool:
        """Abandon the request. Returns ``False`` once the request has finished."""

        return self._task.cancel()

    def done(self) -> bool:
        return self._outcome.done()

    def __await__(self) -> Generator[Any, None, RoomResult]:
        return asyncio.shield(self._outcome).__await__()

    def _settle(self, task: asyncio.Task[RoomDescriptor]) -> None:
        if task.cancelled():
            logger.debug("Room %s request cancelled", self.operation)
            result = RoomResult(error=RequestCancelledError(f"room {self.operation} request cancelled"))
        elif task.exception() is None:
            result = RoomResult(descriptor=task.result())
        else:
            result = RoomResult(error=self._as_room_error(task.exception()))

        if not self._outcome.done():
            self._outcome.set_result(result)
        self._notify(result)

    def _as_room_error(self, exc: BaseException) -> RoomClientError:
        if isinstance(exc, RoomClientError):
            logger.warning("Room %s request failed: %s", self.operation, exc)
            return exc
        logger.error("Room %s request failed unexpectedly", self.operation, exc_info=exc)
        error = NetworkUnreachableError(f"room {self.operation} request failed: {exc}")
        error.__cause__ = exc
        return error

    def _notify(self, result: RoomResult) -> None:
        if self._on_complete is None:
            return
        try:
            pending = self._on_complete(result.descriptor, result.error)
        except Exception:  # noqa: BLE001
            logger.exception("Completion handler for room %s raised", self.operation)
            return
        if inspect.isawaitable(pending):
            follow_up = asyncio.ensure_future(pending)
            follow_up.add_done_callback(self._log_handler_failure)
            self._track(follow_up)

    def _log_handler_failure(self, future: asyncio.Future[Any]) -> None:
        if not future.cancelled() and future.exception() is not None:
            logger.error(
                "Completion handler for room %s raised", self.operation, exc_info=future.exception()
            )


class RoomSessionClient:
    """Talk to the room-management backend on behalf of one application."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._base_url = _normalize_base_url(self._settings.base_url if base_url is None else base_url)
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(self._settings.request_timeout))
        self._pending: set[asyncio.Future[Any]] = set()

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "RoomSessionClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def create_room(
        self,
        room_id: str,
        uid: str,
        on_complete: CompletionHandler | None = None,
        *,
        max_participants: int | None = None,
        rtc_type: int | None = None,
        invite_uids: Sequence[str] | None = None,
    ) -> RoomCall:
        """Ask the service to create ``room_id`` with ``uid`` as its creator."""

        body = CreateRoomRequest(
            source_channel_id=self._settings.source_channel_id,
            source_channel_type=self._settings.source_channel_type,
            creator=uid,
            room_id=room_id,
            rtc_type=int(self._settings.default_rtc_type if rtc_type is None else rtc_type),
            max_participants=(
                self._settings.default_max_participants if max_participants is None else max_participants
            ),
            uids=list(invite_uids or ()),
            device_type=self._settings.device_type,
        )
        path = self._settings.create_path
        return RoomCall("create", lambda: self._fetch_descriptor(path, body), on_complete, self._track)

    def join_room(
        self,
        room_id: str,
        uid: str,
        on_complete: CompletionHandler | None = None,
    ) -> RoomCall:
        """Ask the service to add ``uid`` to an existing room."""

        body = JoinRoomRequest(uid=uid, device_type=self._settings.device_type)
        path = self._room_path(self._settings.join_path, room_id)
        return RoomCall("join", lambda: self._fetch_descriptor(path, body), on_complete, self._track)

    def leave_room(self, room_id: str, uid: str) -> None:
        """Notify the service that ``uid`` left. Best effort, never reports back."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; leave notification for room %s dropped", room_id)
            return
        self._track(loop.create_task(self._notify_leave(room_id, uid)))

    @staticmethod
    def generate_user_id() -> str:
        """Return a participant id for callers that have none of their own."""

        return f"user_{uuid4().hex}"

    @staticmethod
    def generate_uuid() -> str:
        return str(uuid4())

    async def aclose(self) -> None:
        """Wait for outstanding requests, then release an owned HTTP client."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        if self._owns_http:
            await self._http.aclose()

    async def _notify_leave(self, room_id: str, uid: str) -> None:
        try:
            path = self._room_path(self._settings.leave_path, room_id)
            await self._post(path, LeaveRoomRequest(uid=uid))
        except RoomClientError as exc:
            logger.warning("Leave notification for room %s failed: %s", room_id, exc)
        except Exception:  # noqa: BLE001
            logger.warning("Leave notification for room %s failed", room_id, exc_info=True)

    async def _fetch_descriptor(self, path: str, body: BaseModel) -> RoomDescriptor:
        response = await self._post(path, body)
        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError("room service returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise MalformedResponseError(
                f"room service returned {type(payload).__name__} instead of an object"
            )
        return parse_room_descriptor(payload)

    async def _post(self, path: str, body: BaseModel) -> httpx.Response:
        url = f"{self._base_url}{path}"
        logger.debug("POST %s", url)
        try:
            response = await self._http.post(
                url, json=body.model_dump(), timeout=self._settings.request_timeout
            )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"request to {url} timed out") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkUnreachableError(f"request to {url} failed: {exc}") from exc

        if not response.is_success:
            raise ServerError(response.status_code, _error_message(response))
        return response

    def _room_path(self, template: str, room_id: str) -> str:
        return template.format(room_id=quote(room_id, safe=""))

    def _track(self, future: asyncio.Future[Any]) -> None:
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)


def _normalize_base_url(base_url: str) -> str:
    url = base_url.strip().rstrip("/")
    if not url.lower().startswith(("http://", "https://")):
        url = f"http://{url}"
    return url


def _error_message(response: httpx.Response) -> str | None:
    """Pull the human-readable reason out of an error body, if there is one."""

    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        for key in ("message", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return None
