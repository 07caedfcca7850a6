from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

from realty_demo.schemas.demo import DemoState
from realty_demo.services.conversation_simulator import ConversationSimulator
from realty_demo.services.deferred import Clock, DeferredTaskScheduler, SystemClock
from realty_demo.services.demo_store import DemoStateStore, IdFactory
from realty_demo.services.follow_up_timer import FollowUpTimer
from realty_demo.services.snapshot_storage import (
    InMemorySnapshotStorage,
    SnapshotStorage,
    deserialize_state,
    serialize_state,
)

logger = logging.getLogger("realty_demo.runtime")


class DemoRuntime:
    """
    Explicit context for one demo session.

    Lifecycle: build -> restore() -> mutate through store/follow_ups/simulator
    -> every commit is persisted by the storage subscriber -> shutdown().
    """

    def __init__(
        self,
        storage: Optional[SnapshotStorage] = None,
        storage_key: str = "ai-realestate-sample-mode",
        clock: Optional[Clock] = None,
        rnd: Optional[random.Random] = None,
        id_factory: Optional[IdFactory] = None,
        follow_up_clear_seconds: float = 3.0,
        client_reply_seconds: float = 1.5,
    ) -> None:
        self.clock = clock or SystemClock()
        self.storage = storage or InMemorySnapshotStorage()
        self.storage_key = storage_key
        self.scheduler = DeferredTaskScheduler(self.clock)
        self.store = DemoStateStore(self.clock, rnd=rnd, id_factory=id_factory)
        self.follow_ups = FollowUpTimer(
            self.store,
            self.scheduler,
            clear_after_seconds=follow_up_clear_seconds,
        )
        self.simulator = ConversationSimulator(
            self.store,
            self.scheduler,
            typing_delay_seconds=client_reply_seconds,
        )
        self._unsubscribe = None

    def restore(self) -> DemoState:
        """Load the persisted snapshot (if any) and start persisting commits."""
        raw = self.storage.load(self.storage_key)
        restored = deserialize_state(raw, self.clock.now())
        if restored is not None:
            self.store.restore(restored)
            logger.info(
                "Restored demo snapshot (sample_mode=%s, leads=%d)",
                restored.is_sample_mode,
                len(restored.leads),
            )
        else:
            logger.info("No usable demo snapshot; starting from sample defaults.")

        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.persist)
        self.persist(self.store.state)
        return self.store.state

    def persist(self, state: DemoState) -> None:
        if state.is_sample_mode:
            self.storage.save(self.storage_key, serialize_state(state))
        else:
            self.storage.delete(self.storage_key)

    def tick(self) -> int:
        return self.scheduler.run_due()

    async def pump(self, interval_seconds: float) -> None:
        """Run due deferred tasks forever; cancel the task to stop."""
        logger.info("Deferred task pump started (interval=%.2fs)", interval_seconds)
        try:
            while True:
                self.tick()
                await asyncio.sleep(interval_seconds)
        except asyncio.CancelledError:
            logger.info("Deferred task pump stopped.")
            raise

    def shutdown(self) -> None:
        self.simulator.cancel_pending()
        self.follow_ups.cancel_pending_clears()
        self.scheduler.cancel_all()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
