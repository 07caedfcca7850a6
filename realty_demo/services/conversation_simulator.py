from __future__ import annotations

import logging
from typing import Dict, List, Optional

from realty_demo.schemas.demo import ConversationMessage
from realty_demo.services.deferred import DeferredTask, DeferredTaskScheduler
from realty_demo.services.demo_store import DemoStateStore

logger = logging.getLogger("realty_demo.conversation_simulator")

CANNED_CLIENT_REPLIES: List[str] = [
    "Thanks for the update! Looking forward to it.",
    "Sounds great! I'll be there.",
    "Perfect, that works for me.",
    "Thanks for keeping me in the loop!",
    "Appreciate the heads up!",
    "Got it, thanks!",
    "That sounds perfect, thank you!",
]
TYPING_DELAY_SECONDS = 1.5


class ConversationSimulator:
    """
    Fakes a live client on the other end of a concierge thread.

    After the agent sends a message, one canned reply is injected into the
    same conversation once the typing delay has elapsed.
    """

    def __init__(
        self,
        store: DemoStateStore,
        scheduler: DeferredTaskScheduler,
        typing_delay_seconds: float = TYPING_DELAY_SECONDS,
        replies: Optional[List[str]] = None,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.typing_delay_seconds = typing_delay_seconds
        self.replies = replies or list(CANNED_CLIENT_REPLIES)
        self._typing: Dict[str, List[DeferredTask]] = {}

    def is_typing(self, conversation_id: str) -> bool:
        return any(task.pending for task in self._typing.get(conversation_id, []))

    def send_agent_message(
        self,
        conversation_id: str,
        body: str,
        simulate_reply: bool = True,
    ) -> Optional[ConversationMessage]:
        message = self.store.append_conversation_message(conversation_id, body, "agent")
        if message is None:
            return None
        if simulate_reply:
            self.queue_reply(conversation_id)
        return message

    def queue_reply(self, conversation_id: str) -> Optional[DeferredTask]:
        conversation = self.store.state.find_conversation(conversation_id)
        if conversation is None:
            return None

        reply = self.store.rnd.choice(self.replies)
        client_name = conversation.client_name

        def deliver() -> None:
            injected = self.store.inject_client_conversation_message(conversation_id, reply)
            if injected is None:
                logger.info("Conversation %s gone before simulated reply", conversation_id)
                return
            self.store.add_notification("Client replied", f"{client_name} responded automatically.")

        task = self.scheduler.schedule(
            self.typing_delay_seconds,
            deliver,
            label=f"client-reply:{conversation_id}",
        )
        pending = [t for t in self._typing.get(conversation_id, []) if t.pending]
        self._typing[conversation_id] = [*pending, task]
        logger.debug("Queued simulated reply for %s", conversation_id)
        return task

    def cancel_pending(self) -> int:
        cancelled = 0
        for tasks in self._typing.values():
            cancelled += sum(1 for task in tasks if task.cancel())
        self._typing.clear()
        return cancelled
