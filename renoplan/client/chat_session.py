"""
Chat controller.

A ChatSession owns the message list of one conversation. `send_message`
appends the user's message, streams the assistant's reply from the chat
endpoint into a placeholder message, and saves the final reply once. Signed-in
sessions persist through the API; anonymous sessions keep their transcript in
local storage.
"""

import json
from collections.abc import Callable
from enum import Enum
from uuid import uuid4

import httpx
from pydantic import BaseModel, Field

from renoplan.ai.base import ChatMessage
from renoplan.ai.sse import SSEDecoder
from renoplan.client.api import RenoplanAPI
from renoplan.client.exceptions import APIClientError
from renoplan.client.local_storage import LocalStorage, anonymous_chat_key
from renoplan.client.notices import ChatNotice, Notice
from renoplan.db.conversations.schemas import MessageResponse
from renoplan.utils.logger import logger

TITLE_MAX_LENGTH = 50
PHOTO_TITLE = "Photo consultation"


class ChatState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    DONE = "done"
    ERROR = "error"


class LocalMessage(BaseModel):
    """A message as shown in the chat. `id` is None until the store assigns one."""

    id: str | None = None
    role: str
    content: str
    image_url: str | None = Field(None, serialization_alias="imageUrl")

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content, image_url=self.image_url)

    def same_payload(self, message: MessageResponse) -> bool:
        return (
            self.role == message.role.value
            and self.content == message.content
            and self.image_url == message.image_url
        )


class StreamFailedError(Exception):
    """The relay reported a failure inside an otherwise successful stream."""


def conversation_title(content: str) -> str:
    title = content.strip()
    if not title:
        return PHOTO_TITLE
    if len(title) > TITLE_MAX_LENGTH:
        return title[:TITLE_MAX_LENGTH].rstrip() + "..."
    return title


async def _error_body(response: httpx.Response) -> str | None:
    """The `error` field of a failed chat response, if any."""
    try:
        await response.aread()
        body = response.json()
    except (httpx.HTTPError, ValueError):
        return None
    error = body.get("error") if isinstance(body, dict) else None
    return error if isinstance(error, str) else None


class ChatSession:
    """Controller for one chat conversation.

    Args:
        api: API client; anonymous when it has no access token
        conversation_id: Existing conversation to continue
        project_id: Project the conversation is about
        local_storage: Required for anonymous sessions
        session_id: Anonymous session id; generated when omitted
        on_update: Called with the message list after every change
        on_notice: Called when a user-facing notice is raised
    """

    def __init__(
        self,
        api: RenoplanAPI,
        conversation_id: str | None = None,
        project_id: str | None = None,
        local_storage: LocalStorage | None = None,
        session_id: str | None = None,
        on_update: Callable[[list[LocalMessage]], None] | None = None,
        on_notice: Callable[[Notice], None] | None = None,
    ):
        if not api.is_authenticated and local_storage is None:
            raise ValueError("Anonymous chat sessions need local storage")

        self.api = api
        self.conversation_id = conversation_id
        self.project_id = project_id
        self.local_storage = local_storage
        self.session_id = session_id or uuid4().hex
        self.on_update = on_update
        self.on_notice = on_notice

        self.messages: list[LocalMessage] = []
        self.state = ChatState.IDLE
        self.last_notice: Notice | None = None

        if self.is_anonymous:
            self._load_anonymous_transcript()

    @property
    def is_anonymous(self) -> bool:
        return not self.api.is_authenticated

    @property
    def storage_key(self) -> str:
        return anonymous_chat_key(self.session_id)

    def _notify(self) -> None:
        if self.on_update:
            self.on_update(list(self.messages))

    def _raise_notice(self, notice: Notice) -> None:
        self.last_notice = notice
        logger.warning("Chat notice", kind=notice.kind.value, notice=notice.message)
        if self.on_notice:
            self.on_notice(notice)

    # ========== Loading ==========

    def _load_anonymous_transcript(self) -> None:
        raw = self.local_storage.get_item(self.storage_key)
        if not raw:
            return
        try:
            stored = json.loads(raw)
            self.messages = [
                LocalMessage(
                    role=m["role"], content=m["content"], image_url=m.get("imageUrl")
                )
                for m in stored
            ]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable anonymous transcript", error=str(e))
            self.messages = []

    def _save_anonymous_transcript(self) -> None:
        payload = [
            m.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)
            for m in self.messages
        ]
        self.local_storage.set_item(self.storage_key, json.dumps(payload))

    async def load(self, conversation_id: str) -> None:
        """Switch to an existing conversation and fetch its messages."""
        stored = await self.api.conversations.list_messages(conversation_id)
        self.conversation_id = conversation_id
        self.messages = [
            LocalMessage(id=m.id, role=m.role.value, content=m.content, image_url=m.image_url)
            for m in stored
        ]
        self.state = ChatState.IDLE
        self._notify()

    def reset(self) -> None:
        """Start a new conversation."""
        self.conversation_id = None
        self.messages = []
        self.state = ChatState.IDLE
        self.last_notice = None
        if self.is_anonymous:
            self.session_id = uuid4().hex
        self._notify()

    # ========== Persistence ==========

    async def _persist(self, message: LocalMessage) -> None:
        """Best-effort save of one message; failures are logged only."""
        if self.is_anonymous:
            self._save_anonymous_transcript()
            return

        try:
            if self.conversation_id is None:
                conversation = await self.api.conversations.create(
                    title=conversation_title(message.content), project_id=self.project_id
                )
                self.conversation_id = conversation.id

            stored = await self.api.conversations.add_message(
                self.conversation_id, message.role, message.content, message.image_url
            )
            message.id = stored.id
        except APIClientError as e:
            logger.error(
                "Failed to save message",
                error=str(e),
                role=message.role,
                conversation_id=self.conversation_id,
            )

    # ========== Sending ==========

    async def send_message(self, content: str, image_url: str | None = None) -> LocalMessage | None:
        """
        Send a user message and stream the assistant's reply.

        Returns:
            LocalMessage | None: The assistant reply, or None when the turn
            failed (see `last_notice`)
        """
        if self.state == ChatState.STREAMING:
            raise RuntimeError("A reply is already streaming")

        user_message = LocalMessage(role="user", content=content, image_url=image_url)
        self.messages.append(user_message)
        self.last_notice = None
        self._notify()

        await self._persist(user_message)

        self.state = ChatState.STREAMING
        history = [m.to_chat_message() for m in self.messages]

        try:
            response = await self.api.open_chat_stream(
                history,
                conversation_id=self.conversation_id,
                project_id=self.project_id,
                is_anonymous=self.is_anonymous,
            )
        except httpx.HTTPError as e:
            logger.error("Chat request failed", error=str(e))
            return self._fail(Notice.for_kind(ChatNotice.ERROR), placeholder=None)

        if response.is_error:
            server_message = await _error_body(response)
            await response.aclose()
            logger.error(
                "Chat request rejected", status_code=response.status_code, error=server_message
            )
            return self._fail(
                Notice.for_status(response.status_code, server_message), placeholder=None
            )

        placeholder: LocalMessage | None = None
        decoder = SSEDecoder()
        try:
            async for chunk in response.aiter_bytes():
                if decoder.feed(chunk):
                    placeholder = self._render(placeholder, decoder.text)
                if decoder.error:
                    raise StreamFailedError(decoder.error)
                if decoder.done:
                    break

            if decoder.flush():
                placeholder = self._render(placeholder, decoder.text)
            if decoder.error:
                raise StreamFailedError(decoder.error)
        except (httpx.HTTPError, StreamFailedError) as e:
            logger.error("Chat stream failed", error=str(e), error_type=type(e).__name__)
            return self._fail(Notice.for_kind(ChatNotice.ERROR), placeholder=placeholder)
        finally:
            await response.aclose()

        self.state = ChatState.DONE
        if placeholder is None or not decoder.text:
            return None

        await self._persist(placeholder)
        return placeholder

    def _render(self, placeholder: LocalMessage | None, text: str) -> LocalMessage:
        """Show the accumulated reply, adding the assistant message on first use."""
        if placeholder is None:
            placeholder = LocalMessage(role="assistant", content=text)
            self.messages.append(placeholder)
        else:
            placeholder.content = text
        self._notify()
        return placeholder

    def _fail(self, notice: Notice, placeholder: LocalMessage | None) -> None:
        if placeholder is not None:
            self.messages = [m for m in self.messages if m is not placeholder]
            self._notify()
        self.state = ChatState.ERROR
        self._raise_notice(notice)
        return None

    # ========== Realtime ==========

    def merge_remote_message(self, message: MessageResponse) -> bool:
        """
        Apply a message insert broadcast by the store.

        Idempotent by message id. An unsaved local message with the same
        role, content and image takes the incoming id instead of being
        duplicated.

        Returns:
            bool: True if the message was appended
        """
        if message.conversation_id != self.conversation_id:
            return False
        if any(m.id == message.id for m in self.messages):
            return False

        for local in self.messages:
            if local.id is None and local.same_payload(message):
                local.id = message.id
                return False

        self.messages.append(
            LocalMessage(
                id=message.id,
                role=message.role.value,
                content=message.content,
                image_url=message.image_url,
            )
        )
        self._notify()
        return True
