"""Write-once keyed store for pipeline state, partitioned by (namespace, id).

Each stage owns exactly one namespace and writes each cell at most once, so
the store only needs an atomic insert-if-absent plus a plain read. Values are
JSON-compatible dicts; callers always receive their own copy.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.application.interfaces import KeyedStoreInterface

logger = logging.getLogger(__name__)

BLOG_NAMESPACE = "blog"
TTS_NAMESPACE = "tts"


class KeyedStoreError(RuntimeError):
    """Raised when the state store cannot read or persist a value."""


class KeyedStoreConflictError(KeyedStoreError):
    """Raised when a cell that was already written is written again."""


class InMemoryKeyedStore(KeyedStoreInterface):
    """Process-local, mutex-guarded map. Suitable for a single web worker."""

    def __init__(self) -> None:
        self._cells: dict[tuple[str, str], dict[str, Any]] = {}
        self._lock = threading.Lock()

    async def set(self, namespace: str, key: str, value: Mapping[str, Any]) -> None:
        cell = (namespace, str(key))
        snapshot = copy.deepcopy(dict(value))
        with self._lock:
            if cell in self._cells:
                raise KeyedStoreConflictError(
                    f"State cell {namespace}:{key} has already been written."
                )
            self._cells[cell] = snapshot

    async def get(self, namespace: str, key: str) -> Optional[dict[str, Any]]:
        with self._lock:
            stored = self._cells.get((namespace, str(key)))
        if stored is None:
            return None
        return copy.deepcopy(stored)


class SqlAlchemyKeyedStore(KeyedStoreInterface):
    """Durable store backed by the ``pipeline_states`` table."""

    async def set(self, namespace: str, key: str, value: Mapping[str, Any]) -> None:
        from app.database import session_scope
        from app.models.pipeline_state import PipelineState

        async with session_scope() as session:
            session.add(
                PipelineState(
                    namespace=namespace,
                    request_id=str(key),
                    value=dict(value),
                )
            )
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise KeyedStoreConflictError(
                    f"State cell {namespace}:{key} has already been written."
                ) from exc
            except SQLAlchemyError as exc:
                await session.rollback()
                raise KeyedStoreError(f"Failed to persist {namespace}:{key}: {exc}") from exc

    async def get(self, namespace: str, key: str) -> Optional[dict[str, Any]]:
        from app.database import session_scope
        from app.models.pipeline_state import PipelineState

        try:
            async with session_scope() as session:
                result = await session.execute(
                    select(PipelineState.value).where(
                        PipelineState.namespace == namespace,
                        PipelineState.request_id == str(key),
                    )
                )
                stored = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise KeyedStoreError(f"Failed to read {namespace}:{key}: {exc}") from exc

        if stored is None:
            return None
        if not isinstance(stored, dict):
            logger.warning("Ignoring corrupt state cell %s:%s", namespace, key)
            return None
        return dict(stored)


def build_keyed_store(backend: str) -> KeyedStoreInterface:
    """Return the store implementation selected by configuration."""

    if backend == "database":
        return SqlAlchemyKeyedStore()
    return InMemoryKeyedStore()


__all__ = [
    "BLOG_NAMESPACE",
    "TTS_NAMESPACE",
    "InMemoryKeyedStore",
    "KeyedStoreConflictError",
    "KeyedStoreError",
    "SqlAlchemyKeyedStore",
    "build_keyed_store",
]
