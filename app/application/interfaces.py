from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Mapping, Optional


StageHandler = Callable[[dict[str, Any]], Awaitable[None]]


class KeyedStoreInterface(ABC):
    """Persistence contract for pipeline state partitioned by (namespace, id)"""

    @abstractmethod
    async def set(self, namespace: str, key: str, value: Mapping[str, Any]) -> None:
        ...

    @abstractmethod
    async def get(self, namespace: str, key: str) -> Optional[dict[str, Any]]:
        ...


class MessageQueueInterface(ABC):
    """Topic-based hand-off between pipeline stages"""

    @abstractmethod
    async def publish(self, topic: str, payload: Mapping[str, Any]) -> None:
        ...

    @abstractmethod
    def subscribe(self, topic: str, handler: StageHandler) -> None:
        ...


class TextModelClientInterface(ABC):
    """Text-in/text-out language model collaborator"""

    @abstractmethod
    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
    ) -> str | None:
        ...


class SpeechSynthesizerInterface(ABC):
    """Text-to-speech collaborator returning raw audio metadata"""

    @abstractmethod
    async def synthesize(self, text: str) -> Any:
        ...
