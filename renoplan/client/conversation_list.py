"""
Conversation list controller: the sidebar next to the chat.
"""

from collections.abc import Callable

from renoplan.client.api import RenoplanAPI
from renoplan.client.chat_session import ChatSession
from renoplan.client.exceptions import APIClientError
from renoplan.db.conversations.schemas import ConversationResponse
from renoplan.utils.logger import logger


class ConversationList:
    """
    Lists the user's conversations and drives which one the chat shows.

    `selected_id` is None while the chat is on a new, unsaved conversation.
    """

    def __init__(
        self,
        api: RenoplanAPI,
        chat: ChatSession,
        project_id: str | None = None,
        on_change: Callable[[list[ConversationResponse]], None] | None = None,
    ):
        self.api = api
        self.chat = chat
        self.project_id = project_id
        self.on_change = on_change

        self.conversations: list[ConversationResponse] = []
        self.selected_id: str | None = chat.conversation_id

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(list(self.conversations))

    async def refresh(self) -> list[ConversationResponse]:
        """Reload the list, most recently active first."""
        self.conversations = await self.api.conversations.list_all(project_id=self.project_id)
        self._notify()
        return self.conversations

    async def select(self, conversation_id: str) -> None:
        await self.chat.load(conversation_id)
        self.selected_id = conversation_id

    def new_conversation(self) -> None:
        self.selected_id = None
        self.chat.reset()

    async def delete(self, conversation_id: str) -> bool:
        """
        Delete a conversation.

        If it is the one on screen, the chat goes back to a new conversation.

        Returns:
            bool: False if the server refused the delete
        """
        try:
            await self.api.conversations.delete(conversation_id)
        except APIClientError as e:
            logger.error(
                "Failed to delete conversation", error=str(e), conversation_id=conversation_id
            )
            return False

        self.conversations = [c for c in self.conversations if c.id != conversation_id]
        self._notify()

        if conversation_id in (self.selected_id, self.chat.conversation_id):
            self.new_conversation()
        return True

    async def rename(self, conversation_id: str, title: str) -> ConversationResponse:
        updated = await self.api.conversations.update(conversation_id, title=title)
        self.conversations = [
            updated if c.id == conversation_id else c for c in self.conversations
        ]
        self._notify()
        return updated
