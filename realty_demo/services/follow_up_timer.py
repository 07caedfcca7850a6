from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from realty_demo.schemas.demo import ScheduledFollowUp
from realty_demo.services.deferred import DeferredTask, DeferredTaskScheduler
from realty_demo.services.demo_store import DemoStateStore
from realty_demo.services.message_templates import compose_quick_message

logger = logging.getLogger("realty_demo.follow_up_timer")

DELAY_HOURS: Dict[str, int] = {
    "1 hour": 1,
    "4 hours": 4,
    "1 day": 24,
    "2 days": 48,
    "3 days": 72,
    "1 week": 168,
}
DEFAULT_DELAY_HOURS = 24
SENT_CLEAR_SECONDS = 3.0


def delay_to_hours(delay: str) -> int:
    hours = DELAY_HOURS.get(delay)
    if hours is None:
        logger.warning("Unknown follow-up delay %r; defaulting to %sh", delay, DEFAULT_DELAY_HOURS)
        return DEFAULT_DELAY_HOURS
    return hours


@dataclass
class Countdown:
    label: str  # "Sent" | "Overdue" | "Scheduled"
    remaining: Optional[str]  # "2 days", "1 hour", or None when not counting down


def countdown(item: ScheduledFollowUp, now: datetime) -> Countdown:
    """Badge label and time-until-send text for a scheduled item."""
    if item.status == "sent":
        return Countdown(label="Sent", remaining=None)

    if now > item.scheduled_for:
        return Countdown(label="Overdue", remaining=None)

    seconds = (item.scheduled_for - now).total_seconds()
    if seconds >= 86400:
        days = math.ceil(seconds / 86400)
        remaining = f"{days} day{'s' if days > 1 else ''}"
    else:
        hours = max(1, math.ceil(seconds / 3600))
        remaining = f"{hours} hour{'s' if hours > 1 else ''}"
    return Countdown(label="Scheduled", remaining=remaining)


class FollowUpTimer:
    """
    Scheduled follow-ups for leads.

    Nothing fires in the background: a pending item waits until someone
    sends it. The only timer involved is the short delay that clears a sent
    item from the list.
    """

    def __init__(
        self,
        store: DemoStateStore,
        scheduler: DeferredTaskScheduler,
        clear_after_seconds: float = SENT_CLEAR_SECONDS,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.clear_after_seconds = clear_after_seconds
        self._clear_tasks: Dict[str, DeferredTask] = {}

    def _new_id(self, lead_id: str, now: datetime) -> str:
        base = f"followup-{lead_id}-{int(now.timestamp() * 1000)}"
        candidate, n = base, 1
        while self.store.state.find_follow_up(candidate) is not None:
            n += 1
            candidate = f"{base}-{n}"
        return candidate

    def schedule(self, lead_id: str, delay: str) -> Optional[ScheduledFollowUp]:
        lead = self.store.state.find_lead(lead_id)
        if lead is None:
            return None

        now = self.store.clock.now()
        item = ScheduledFollowUp(
            id=self._new_id(lead_id, now),
            lead_id=lead_id,
            lead_name=lead.name,
            conversation_id=lead.conversation_id,
            scheduled_for=now + timedelta(hours=delay_to_hours(delay)),
            status="pending",
            # Frozen now; later edits to the lead do not change it.
            message=compose_quick_message(lead),
            delay=delay,
        )
        self.store.add_scheduled_follow_up(item)
        self.store.add_notification(
            "Follow-up scheduled",
            f"Automated message scheduled for {lead.name} in {delay}.",
        )
        logger.info("Scheduled follow-up %s for lead %s in %s", item.id, lead_id, delay)
        return item

    def cancel(self, follow_up_id: str) -> bool:
        task = self._clear_tasks.pop(follow_up_id, None)
        if task is not None:
            task.cancel()
        removed = self.store.remove_scheduled_follow_up(follow_up_id)
        if removed:
            logger.info("Cancelled follow-up %s", follow_up_id)
        return removed

    def snooze(self, follow_up_id: str, delay: str) -> Optional[ScheduledFollowUp]:
        item = self.store.state.find_follow_up(follow_up_id)
        if item is None or item.status == "sent":
            return None
        scheduled_for = self.store.clock.now() + timedelta(hours=delay_to_hours(delay))
        return self.store.set_follow_up_status(follow_up_id, "snoozed", scheduled_for)

    def send(self, follow_up_id: str) -> Optional[ScheduledFollowUp]:
        if not self.store.state.automation_enabled:
            logger.info("Automation paused; not sending follow-up %s", follow_up_id)
            return None

        item = self.store.state.find_follow_up(follow_up_id)
        if item is None or item.status == "sent":
            return None

        if item.conversation_id and item.message:
            self.store.append_conversation_message(item.conversation_id, item.message, "agent")

        sent = self.store.set_follow_up_status(follow_up_id, "sent")
        self._clear_tasks[follow_up_id] = self.scheduler.schedule(
            self.clear_after_seconds,
            lambda: self._clear(follow_up_id),
            label=f"clear-followup:{follow_up_id}",
        )
        self.store.add_notification("Follow-up sent", f"Message delivered to {item.lead_name}.")
        logger.info("Sent follow-up %s to %s", follow_up_id, item.lead_name)
        return sent

    def _clear(self, follow_up_id: str) -> None:
        self._clear_tasks.pop(follow_up_id, None)
        self.store.remove_scheduled_follow_up(follow_up_id)

    def cancel_pending_clears(self) -> None:
        for task in self._clear_tasks.values():
            task.cancel()
        self._clear_tasks.clear()
