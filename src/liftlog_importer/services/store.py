"""
Object store boundary.

``StoreWriter`` is the only component that touches the store handle. Imports
send it finished batches over a queue; it inserts every workout in a batch and
then saves once, so concurrent imports never interleave partial aggregates.
"""

import asyncio
import logging
import uuid
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from liftlog_importer.models import Workout

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    def insert(self, workout: Workout) -> None:
        ...

    def delete(self, workout: Workout) -> None:
        ...

    def save(self) -> None:
        ...


class InMemoryObjectStore:
    """Dict-backed store. Deleting a workout drops its exercises and sets with it."""

    def __init__(self):
        self._pending: Dict[uuid.UUID, Workout] = {}
        self._saved: Dict[uuid.UUID, Workout] = {}
        self.save_count = 0

    def insert(self, workout: Workout) -> None:
        self._pending[workout.id] = workout

    def delete(self, workout: Workout) -> None:
        self._pending.pop(workout.id, None)
        self._saved.pop(workout.id, None)

    def save(self) -> None:
        self._saved.update(self._pending)
        self._pending.clear()
        self.save_count += 1

    @property
    def workouts(self) -> List[Workout]:
        return list(self._saved.values())


class StoreWriter:
    """Serializes batch writes to one ObjectStore through a single worker task."""

    def __init__(self, store: ObjectStore):
        self._store = store
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "StoreWriter":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def store(self) -> ObjectStore:
        return self._store

    def start(self) -> None:
        loop = asyncio.get_running_loop()
        # A worker left behind on another event loop cannot serve this one
        if self._worker is None or self._worker.done() or self._worker.get_loop() is not loop:
            self._queue = asyncio.Queue()
            self._worker = asyncio.create_task(self._run())

    async def close(self) -> None:
        if self._worker is None:
            return
        if self._worker.get_loop() is not asyncio.get_running_loop():
            self._worker = None
            return
        await self._queue.put(None)
        await self._worker
        self._worker = None

    async def submit(self, workouts: Sequence[Workout]) -> int:
        """Write a complete batch and wait until it is saved. Returns the number written."""
        self.start()
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        await self._queue.put((list(workouts), future))
        return await future

    async def _run(self) -> None:
        while True:
            message: Optional[Tuple[List[Workout], asyncio.Future]] = await self._queue.get()
            if message is None:
                break
            batch, future = message
            try:
                self._write(batch)
            except Exception as e:
                logger.exception(f"Store write failed for batch of {len(batch)} workouts")
                if not future.done():
                    future.set_exception(e)
            else:
                if not future.done():
                    future.set_result(len(batch))

    def _write(self, batch: List[Workout]) -> None:
        inserted: List[Workout] = []
        try:
            for workout in batch:
                self._store.insert(workout)
                inserted.append(workout)
            self._store.save()
        except Exception:
            # Leave nothing from a failed batch behind
            for workout in inserted:
                self._store.delete(workout)
            raise
        logger.info(f"Saved {len(batch)} workouts")
