"""Shared chat models for the AI endpoints."""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A chat message as exchanged with the client.

    `image_url` (or `imageUrl`) carries an attached photo; such messages are
    sent to the model as multimodal content.
    """

    model_config = ConfigDict(populate_by_name=True)

    role: Literal["user", "assistant"]
    content: str
    image_url: str | None = Field(
        None, validation_alias=AliasChoices("image_url", "imageUrl")
    )

    def to_gateway(self) -> dict[str, Any]:
        """Format for the chat-completions API."""
        if self.image_url:
            return {
                "role": self.role,
                "content": [
                    {"type": "text", "text": self.content},
                    {"type": "image_url", "image_url": {"url": self.image_url}},
                ],
            }
        return {"role": self.role, "content": self.content}


class SSEEvent(BaseModel):
    """Server-Sent Event wrapper for type-safe SSE formatting.

    Follows the W3C Server-Sent Events specification:
    https://html.spec.whatwg.org/multipage/server-sent-events.html
    """

    data: str
    event: Literal["error", "done"] | None = None
    id: str | None = None
    retry: int | None = None

    def format(self) -> str:
        """Format as SSE protocol string.

        Returns:
            str: Properly formatted SSE event with trailing newlines
        """
        lines = []
        if self.event:
            lines.append(f"event: {self.event}")
        if self.id:
            lines.append(f"id: {self.id}")
        if self.retry is not None:
            lines.append(f"retry: {self.retry}")
        lines.append(f"data: {self.data}")
        lines.append("")  # Empty line as event delimiter
        return "\n".join(lines) + "\n"
