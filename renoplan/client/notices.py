"""User-facing notices raised by the chat controller."""

from enum import Enum

from pydantic import BaseModel


class ChatNotice(str, Enum):
    RATE_LIMITED = "rate_limited"
    PAYMENT_REQUIRED = "payment_required"
    INVALID_IMAGE = "invalid_image"
    ERROR = "error"


NOTICE_MESSAGES = {
    ChatNotice.RATE_LIMITED: "Too many requests. Please wait a moment and try again.",
    ChatNotice.PAYMENT_REQUIRED: "AI credits exhausted. Please add credits to continue.",
    ChatNotice.INVALID_IMAGE: "The image could not be processed. Please try another photo.",
    ChatNotice.ERROR: "Failed to get a response from the assistant. Please try again.",
}

# HTTP statuses of the chat endpoint that have a dedicated notice
STATUS_NOTICES = {
    429: ChatNotice.RATE_LIMITED,
    402: ChatNotice.PAYMENT_REQUIRED,
    400: ChatNotice.INVALID_IMAGE,
}


class Notice(BaseModel):
    kind: ChatNotice
    message: str

    @classmethod
    def for_kind(cls, kind: ChatNotice, message: str | None = None) -> "Notice":
        return cls(kind=kind, message=message or NOTICE_MESSAGES[kind])

    @classmethod
    def for_status(cls, status_code: int, server_message: str | None = None) -> "Notice":
        """Notice for a failed chat request.

        Only the image-processing notice carries the server's own message.
        """
        kind = STATUS_NOTICES.get(status_code, ChatNotice.ERROR)
        if kind is ChatNotice.INVALID_IMAGE:
            return cls.for_kind(kind, server_message)
        return cls.for_kind(kind)
