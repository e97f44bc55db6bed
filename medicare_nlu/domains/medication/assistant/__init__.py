"""Rule-based medication chat assistant."""

from .chat_assistant import (
    AssistantResponse,
    ChatAction,
    ChatActionType,
    ChatContext,
    MedicationChatAssistant,
    quick_suggestions,
)

__all__ = [
    "AssistantResponse",
    "ChatAction",
    "ChatActionType",
    "ChatContext",
    "MedicationChatAssistant",
    "quick_suggestions",
]
