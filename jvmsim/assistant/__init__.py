"""
JVMSim Chat Assistant
"""

from .chat_service import (
    ExpertService, GeminiExpertService, ChatAssistant, ChatMessage, build_prompt,
    MISSING_KEY_MESSAGE, UNAVAILABLE_MESSAGE, NO_ANSWER_MESSAGE, GREETING
)

__all__ = [
    "ExpertService", "GeminiExpertService", "ChatAssistant", "ChatMessage", "build_prompt",
    "MISSING_KEY_MESSAGE", "UNAVAILABLE_MESSAGE", "NO_ANSWER_MESSAGE", "GREETING",
]
