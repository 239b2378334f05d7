"""
Core content models shared by the function bridge and the flow signals.

ChatMessageContent is the "content wrapper" a function may return instead
of a plain value: helpers unwrap it to its text before handing it back to
the template. ChatHistory is what flow steps stash on a result so the
orchestrator can carry a conversation across iterations.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# ──────────────────────────────────────────────────────────────
#  Enums
# ──────────────────────────────────────────────────────────────

class AuthorRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


# ──────────────────────────────────────────────────────────────
#  Chat content
# ──────────────────────────────────────────────────────────────

class ChatMessageContent(BaseModel):
    """A single chat message produced by (or fed to) a model-backed function."""
    role: AuthorRole = AuthorRole.ASSISTANT
    content: Optional[str] = None                 # primary payload
    model_id: str = ""                            # which model produced it, if any
    metadata: dict[str, Any] = {}

    def __str__(self) -> str:
        return self.content or ""


class ChatHistory(BaseModel):
    """Ordered list of chat messages."""
    messages: list[ChatMessageContent] = Field(default_factory=list)

    def add_message(self, role: AuthorRole, content: str) -> ChatMessageContent:
        message = ChatMessageContent(role=role, content=content)
        self.messages.append(message)
        return message

    def add_user_message(self, content: str) -> ChatMessageContent:
        return self.add_message(AuthorRole.USER, content)

    def add_assistant_message(self, content: str) -> ChatMessageContent:
        return self.add_message(AuthorRole.ASSISTANT, content)

    def serialize(self) -> str:
        return self.model_dump_json()

    @classmethod
    def deserialize(cls, text: str) -> "ChatHistory":
        return cls.model_validate_json(text)

    def __len__(self) -> int:
        return len(self.messages)
