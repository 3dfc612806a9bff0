"""
Chat assistant for JVMSim.

Forwards learner questions, together with a description of the component
the learner is looking at, to an external text-generation service. The
service is optional: when it is missing or failing the assistant answers
with a fixed message and the simulation carries on untouched.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Callable, List, Mapping, Optional
from dataclasses import dataclass

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)


MISSING_KEY_MESSAGE = "Please configure an API key to use the AI assistant."
UNAVAILABLE_MESSAGE = "The AI service is temporarily unavailable, please check your network or API key."
NO_ANSWER_MESSAGE = "Sorry, I cannot answer right now, please try again later."
GREETING = ("Hello! I'm your JVM assistant. Any questions about the demo you just "
            "watched or about how the JVM works?")

PROMPT_TEMPLATE = """\
You are a senior Java Virtual Machine (JVM) expert and educator.
Answer the learner's question about the JVM in plain, lively language.

JVM context the learner is currently looking at (if any): {context}

Learner question: {question}

Keep the answer short and focused, and use analogies to explain complex ideas.
"""


def build_prompt(question: str, context: Optional[str] = None) -> str:
    return PROMPT_TEMPLATE.format(context=context or "none", question=question)


class ExpertService(ABC):
    """External question-answering backend"""

    @abstractmethod
    def ask(self, question: str, context: Optional[str] = None) -> str:
        """Return an answer; implementations must not raise"""


class GeminiExpertService(ExpertService):
    """
    Client for the Gemini models through the google-genai SDK.

    The API key is read from GEMINI_API_KEY (or API_KEY) when not given.
    The SDK client is created on first use and reused afterwards.
    """

    DEFAULT_MODEL = "gemini-2.5-flash"

    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_MODEL,
                 timeout: float = 30.0, environ: Optional[Mapping[str, str]] = None,
                 client: Optional[genai.Client] = None):
        environ = os.environ if environ is None else environ
        self.api_key = api_key or environ.get("GEMINI_API_KEY") or environ.get("API_KEY")
        self.model = model
        self.timeout = timeout
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=int(self.timeout * 1000))
            )
        return self._client

    def ask(self, question: str, context: Optional[str] = None) -> str:
        if not self.configured:
            logger.warning("No API key set for the chat assistant")
            return MISSING_KEY_MESSAGE

        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=build_prompt(question, context),
            )
            text = response.text
        except Exception as e:
            logger.error("Chat service error: %s", e)
            return UNAVAILABLE_MESSAGE

        if text is None:
            return NO_ANSWER_MESSAGE
        if not isinstance(text, str):
            logger.error("Chat service returned %s instead of text", type(text).__name__)
            return UNAVAILABLE_MESSAGE
        return text.strip() or NO_ANSWER_MESSAGE


@dataclass
class ChatMessage:
    role: str  # "user" or "model"
    text: str


class ChatAssistant:
    """Conversation front end tied to the simulator's selected component"""

    def __init__(self, service: ExpertService, context_provider: Callable[[], str]):
        self.service = service
        self.context_provider = context_provider
        self.messages: List[ChatMessage] = [ChatMessage("model", GREETING)]

    def ask(self, question: str) -> Optional[str]:
        """Send a question; blank input is ignored and returns None"""
        question = question.strip()
        if not question:
            return None

        self.messages.append(ChatMessage("user", question))
        answer = self.service.ask(question, self.context_provider())
        self.messages.append(ChatMessage("model", answer))
        return answer
