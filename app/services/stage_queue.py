"""In-process topic queue that chains the content pipeline stages."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from app.application.interfaces import MessageQueueInterface, StageHandler

logger = logging.getLogger("app.services.content_pipeline")


class StageQueueError(RuntimeError):
    """Raised when a message is published to a topic nobody consumes."""


class InProcessStageQueue(MessageQueueInterface):
    """One ``asyncio.Queue`` and a small worker pool per subscribed topic.

    ``publish`` never waits for the consumer: the message is enqueued and the
    caller continues. Handler exceptions are logged and swallowed by the worker
    so a single failing request cannot take down the topic.
    """

    def __init__(self, *, workers_per_topic: int = 2) -> None:
        self._workers_per_topic = max(1, workers_per_topic)
        self._handlers: dict[str, StageHandler] = {}
        self._queues: dict[str, asyncio.Queue[dict[str, Any]]] = {}
        self._tasks: list[asyncio.Task[None]] = []
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def topics(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    def subscribe(self, topic: str, handler: StageHandler) -> None:
        """Register the single consumer of ``topic``."""

        if topic in self._handlers:
            raise StageQueueError(f"Topic '{topic}' already has a consumer.")
        self._handlers[topic] = handler
        self._queues[topic] = asyncio.Queue()

    async def publish(self, topic: str, payload: Mapping[str, Any]) -> None:
        """Enqueue ``payload`` for the consumer of ``topic``."""

        queue = self._queues.get(topic)
        if queue is None:
            raise StageQueueError(f"No consumer subscribed to topic '{topic}'.")
        self._in_flight += 1
        self._idle.clear()
        queue.put_nowait(dict(payload))
        logger.debug("Published to %s (pending=%s)", topic, queue.qsize())

    async def start(self) -> None:
        """Spawn the worker tasks for every subscribed topic."""

        if self._tasks:
            return
        for topic in self._handlers:
            for index in range(self._workers_per_topic):
                self._tasks.append(
                    asyncio.create_task(
                        self._worker(topic),
                        name=f"stage-{topic}-{index}",
                    )
                )
        logger.info(
            "Stage queue started topics=%s workers_per_topic=%s",
            ",".join(self._handlers),
            self._workers_per_topic,
        )

    async def stop(self) -> None:
        """Cancel the workers; messages still queued are dropped."""

        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info("Stage queue stopped")

    async def join(self) -> None:
        """Wait until every published message, including follow-ups, is handled.

        A handler publishes its follow-up before it is marked done, so the
        in-flight count only reaches zero once a whole chain has finished.
        """

        await self._idle.wait()

    async def _worker(self, topic: str) -> None:
        queue = self._queues[topic]
        handler = self._handlers[topic]
        while True:
            payload = await queue.get()
            try:
                await handler(payload)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(
                    "Stage handler for %s failed request_id=%s",
                    topic,
                    payload.get("request_id"),
                )
            finally:
                queue.task_done()
                self._in_flight -= 1
                if self._in_flight == 0:
                    self._idle.set()


__all__ = ["InProcessStageQueue", "StageQueueError"]
