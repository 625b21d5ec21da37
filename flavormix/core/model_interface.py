"""Completion client interface for LLM integration."""

import re
import logging
from typing import Optional, List
from abc import ABC, abstractmethod

from openai import AsyncOpenAI, OpenAIError

from flavormix.errors import UpstreamFailure
from flavormix.models.schemas import ChatMessage

logger = logging.getLogger(__name__)


class BaseCompletionClient(ABC):
    """Abstract base class for chat completion clients."""

    @abstractmethod
    async def complete(self, messages: List[ChatMessage], max_tokens: int = 150) -> str:
        """Return the text of the top completion for a conversation."""
        pass

    @abstractmethod
    def is_loaded(self) -> bool:
        """Check if the client is ready."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get model name."""
        pass

    async def close(self) -> None:
        """Release any resources held by the client."""
        return None


class MockCompletionClient(BaseCompletionClient):
    """Mock completion client for testing and offline mode."""

    _name_pattern = re.compile(r"Name: ([^,;]+),")

    def __init__(self):
        self._loaded = True
        self._name = "mock-mix-model"

    async def complete(self, messages: List[ChatMessage], max_tokens: int = 150) -> str:
        """Generate a mock mix from the flavor names in the prompt."""
        prompt = messages[-1].content if messages else ""
        names = [name.strip() for name in self._name_pattern.findall(prompt)]
        names = [name for name in names if name]

        if not names:
            return "There are no flavors in the catalog to build a mix from."

        picked = names[:3]
        if len(picked) == 1:
            blend = picked[0]
        else:
            blend = ", ".join(picked[:-1]) + f" and {picked[-1]}"
        text = f"Try a bowl of {blend}, packed in equal parts for a balanced session."
        return " ".join(text.split()[:max_tokens])

    def is_loaded(self) -> bool:
        return self._loaded

    def get_model_name(self) -> str:
        return self._name


class OpenAICompletionClient(BaseCompletionClient):
    """Interface for the OpenAI chat completions API."""

    def __init__(
        self,
        model: str = "gpt-3.5-turbo",
        api_key: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None
    ):
        self._model = model
        # One attempt per request; callers retry at the transport level
        self._client = client or AsyncOpenAI(api_key=api_key, max_retries=0)

    async def complete(self, messages: List[ChatMessage], max_tokens: int = 150) -> str:
        """Generate text using the chat completions API."""
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[message.model_dump() for message in messages],
                max_tokens=max_tokens
            )
        except OpenAIError as e:
            raise UpstreamFailure(f"Completion request failed: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise UpstreamFailure(f"Malformed completion response: {e}") from e

        if not isinstance(content, str):
            raise UpstreamFailure("Completion response has no text content")
        return content

    def is_loaded(self) -> bool:
        return self._client is not None

    def get_model_name(self) -> str:
        return self._model

    async def close(self) -> None:
        await self._client.close()


class CompletionManager:
    """Manages completion client selection."""

    def __init__(self):
        self._interface: Optional[BaseCompletionClient] = None

    def initialize(
        self,
        use_mock: bool = False,
        model: str = "gpt-3.5-turbo",
        api_key: Optional[str] = None
    ) -> BaseCompletionClient:
        """Initialize the appropriate completion client."""
        if use_mock:
            logger.info("Using mock completion client")
            self._interface = MockCompletionClient()
            return self._interface

        logger.info(f"Using OpenAI completion client with model {model}")
        self._interface = OpenAICompletionClient(model=model, api_key=api_key)
        return self._interface

    @property
    def interface(self) -> Optional[BaseCompletionClient]:
        return self._interface

    def is_ready(self) -> bool:
        return self._interface is not None and self._interface.is_loaded()

    async def shutdown(self) -> None:
        if self._interface is not None:
            await self._interface.close()
            self._interface = None


_completion_manager: Optional[CompletionManager] = None


def get_completion_manager() -> CompletionManager:
    """Get the global completion manager."""
    global _completion_manager
    if _completion_manager is None:
        _completion_manager = CompletionManager()
    return _completion_manager
