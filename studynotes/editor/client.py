"""
StudyNotes — Notes API Client
==============================

What:  Async client the editor uses to talk to the notes REST API.
How:   httpx.AsyncClient against settings.api_base_url. Error bodies
       ({"error", "message", "details", "request_id"}) are turned back into
       the shared exception types:

           400 → ValidationError
           404 → NotFoundError
           any other failure status, or no response at all → ApiError

       Reads are idempotent and are retried with tenacity on transport
       failures (connection refused, timeouts). Writes are sent once; a
       failed save is picked up by the next autosave cycle instead.
Who:   EditorSession (load/save) and NoteListView (list/search/create/delete).

Every request carries a fresh X-Request-ID so client and server logs line up.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from studynotes.config import settings
from studynotes.exceptions import ApiError, NotFoundError, StudyNotesError, ValidationError
from studynotes.schemas.block import Block
from studynotes.schemas.note import NoteResponse

logger = logging.getLogger(__name__)


def _error_for(response: httpx.Response, resource_id: Optional[int] = None) -> StudyNotesError:
    """Rebuild the server's error as an exception."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    message = body.get("message") or f"Request failed with status {response.status_code}"
    details = body.get("details") or {}
    context: Dict[str, Any] = {"status_code": response.status_code, "details": details}
    if body.get("request_id"):
        context["request_id"] = body["request_id"]

    if response.status_code == 400:
        return ValidationError(message=message, field=details.get("field"), context=context)
    if response.status_code == 404:
        return NotFoundError(
            resource="note",
            resource_id=str(resource_id) if resource_id is not None else None,
            context=context,
        )
    return ApiError(message=message, status_code=response.status_code, context=context)


class NotesClient:
    """
    Usage:
        async with NotesClient() as client:
            note = await client.create_note("Untitled Note", blocks)
            await client.update_note(note.id, title="Biology")

    `transport` lets callers route requests somewhere other than the network
    (tests pass httpx.ASGITransport(app=app) to talk to the app in-process).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_attempts: Optional[int] = None,
        retry_min_wait: Optional[float] = None,
        retry_max_wait: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.retry_attempts = retry_attempts if retry_attempts is not None else settings.retry_max_attempts
        self.retry_min_wait = retry_min_wait if retry_min_wait is not None else settings.retry_min_wait
        self.retry_max_wait = retry_max_wait if retry_max_wait is not None else settings.retry_max_wait
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.api_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "NotesClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Transport ─────────────────────────────────────────────────────────

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = {"X-Request-ID": uuid.uuid4().hex[:8]}
        return await self._http.request(method, path, headers=headers, **kwargs)

    async def _send_with_retry(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential_jitter(
                multiplier=self.retry_min_wait,
                max=self.retry_max_wait,
                jitter=self.retry_min_wait,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(self._send, method, path, **kwargs)

    async def _request(
        self,
        method: str,
        path: str,
        resource_id: Optional[int] = None,
        retry: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            if retry:
                response = await self._send_with_retry(method, path, **kwargs)
            else:
                response = await self._send(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.error("%s %s failed: %s: %s", method, path, type(e).__name__, str(e))
            raise ApiError(
                message="Could not reach the notes service",
                context={"error_type": type(e).__name__},
            ) from e

        if response.is_success:
            return response

        error = _error_for(response, resource_id)
        logger.warning("%s %s → %d: %s", method, path, response.status_code, error.message)
        raise error

    # ── Notes API ─────────────────────────────────────────────────────────

    async def list_notes(self) -> List[NoteResponse]:
        response = await self._request("GET", "/api/notes", retry=True)
        return [NoteResponse.model_validate(item) for item in response.json()]

    async def search_notes(self, query: str) -> List[NoteResponse]:
        response = await self._request(
            "GET", "/api/notes/search", params={"q": query}, retry=True
        )
        return [NoteResponse.model_validate(item) for item in response.json()]

    async def get_note(self, note_id: int) -> NoteResponse:
        response = await self._request(
            "GET", f"/api/notes/{note_id}", resource_id=note_id, retry=True
        )
        return NoteResponse.model_validate(response.json())

    async def create_note(self, title: str, blocks: Sequence[Block] = ()) -> NoteResponse:
        payload = {"title": title, "blocks": [block.to_wire() for block in blocks]}
        response = await self._request("POST", "/api/notes", json=payload)
        return NoteResponse.model_validate(response.json())

    async def update_note(
        self,
        note_id: int,
        title: Optional[str] = None,
        blocks: Optional[Sequence[Block]] = None,
    ) -> NoteResponse:
        """PATCH the provided fields; a block list replaces the stored one."""
        payload: Dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if blocks is not None:
            payload["blocks"] = [block.to_wire() for block in blocks]
        response = await self._request(
            "PATCH", f"/api/notes/{note_id}", resource_id=note_id, json=payload
        )
        return NoteResponse.model_validate(response.json())

    async def delete_note(self, note_id: int) -> None:
        await self._request("DELETE", f"/api/notes/{note_id}", resource_id=note_id)
