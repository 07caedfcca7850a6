from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from realty_demo.schemas.demo import (
    ChatMessage,
    ConversationMessage,
    DemoDocument,
    DemoLead,
    DemoNotification,
    DemoProperty,
    DemoState,
    FollowUpDraft,
    FollowUpStatus,
    LeadCreate,
    MarketingPost,
    ScheduledFollowUp,
)
from realty_demo.services.deferred import Clock
from realty_demo.services.message_templates import compose_follow_up_draft
from realty_demo.services.sample_library import (
    PROPERTY_LIBRARY,
    build_empty_state,
    build_lead_library,
    build_sample_state,
)

logger = logging.getLogger("realty_demo.demo_store")

NOTIFICATION_LIMIT = 8
MARKETING_POST_LIMIT = 50
SCORE_FLOOR = 55
SCORE_CEILING = 99
NEW_LEAD_BASE_SCORE = 82

Subscriber = Callable[[DemoState], None]
IdFactory = Callable[[], str]


def _uuid_id() -> str:
    return str(uuid.uuid4())


def adjust_score(score: int, rnd: random.Random) -> int:
    """Jitter a score by -5..+4 and clamp it into [55, 99]."""
    variation = rnd.randint(-5, 4)
    return max(SCORE_FLOOR, min(SCORE_CEILING, score + variation))


class DemoStateStore:
    """
    Single source of truth for sample-mode business state.

    Every mutation builds a new DemoState, swaps it in, and notifies
    subscribers. Missing ids are silent no-ops. The store never checks
    is_sample_mode before mutating; callers guard on the mode flag.
    """

    def __init__(
        self,
        clock: Clock,
        rnd: Optional[random.Random] = None,
        id_factory: Optional[IdFactory] = None,
        initial: Optional[DemoState] = None,
    ) -> None:
        self.clock = clock
        self.rnd = rnd or random.Random()
        self.new_id: IdFactory = id_factory or _uuid_id
        self._subscribers: List[Subscriber] = []
        self._state: DemoState = initial or build_sample_state(clock.now())

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    @property
    def state(self) -> DemoState:
        return self._state

    @property
    def property_library(self) -> List[DemoProperty]:
        return list(PROPERTY_LIBRARY)

    def lead_library(self) -> List[DemoLead]:
        return build_lead_library(self.clock.now())

    def snapshot(self) -> DemoState:
        """Deep copy of the current state, safe to hold across mutations."""
        return self._state.model_copy(deep=True)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def restore(self, state: DemoState) -> None:
        """Replace state wholesale, e.g. from a persisted snapshot."""
        self._commit(state, "restore")

    def _commit(self, new_state: DemoState, action: str) -> None:
        if self._should_reseed(new_state):
            logger.info("Sample mode with no pipeline data after %s; reseeding.", action)
            new_state = build_sample_state(self.clock.now())

        self._state = new_state
        logger.debug("State committed after %s", action)

        for callback in list(self._subscribers):
            try:
                callback(new_state)
            except Exception:
                logger.exception("State subscriber failed after %s", action)

    @staticmethod
    def _should_reseed(state: DemoState) -> bool:
        return state.is_sample_mode and not (
            state.leads or state.deals or state.posts or state.documents
        )

    def _update(self, action: str, **changes: Any) -> None:
        self._commit(self._state.model_copy(update=changes), action)

    def _now(self) -> datetime:
        return self.clock.now()

    # ------------------------------------------------------------------
    # Mode switches
    # ------------------------------------------------------------------

    def load_sample_data(self) -> None:
        self._commit(build_sample_state(self._now()), "load_sample_data")
        logger.info("Sample data loaded.")

    def clear_sample_data(self) -> None:
        self._commit(build_empty_state(), "clear_sample_data")
        logger.info("Sample data cleared; live mode active.")

    def reset_demo_data(self) -> None:
        """Full reseed; discards every edit made during the demo."""
        self._commit(build_sample_state(self._now()), "reset_demo_data")
        logger.info("Demo data reset to seed.")

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def set_insight(self, value: str) -> None:
        self._update("set_insight", insight=value)

    def add_notification(
        self,
        title: str,
        detail: str,
        timestamp: Optional[datetime] = None,
    ) -> DemoNotification:
        item = DemoNotification(
            id=self.new_id(),
            title=title,
            detail=detail,
            timestamp=timestamp or self._now(),
        )
        notifications = [item, *self._state.notifications][:NOTIFICATION_LIMIT]
        self._update("add_notification", notifications=notifications)
        return item

    def append_assistant_chat(self, role: str, content: str) -> None:
        chat = [*self._state.chat, ChatMessage(role=role, content=content)]
        self._update("append_assistant_chat", chat=chat)

    def set_automation_enabled(self, enabled: bool) -> None:
        self._update("set_automation_enabled", automation_enabled=enabled)

    # ------------------------------------------------------------------
    # Leads
    # ------------------------------------------------------------------

    def add_lead_from_library(self) -> Optional[DemoLead]:
        """Drop a copy of a random library lead into the pipeline (sample mode only)."""
        if not self._state.is_sample_mode:
            return None

        library = self.lead_library()
        template = self.rnd.choice(library)
        now = self._now()
        lead = template.model_copy(
            update={
                "id": self.new_id(),
                "created_at": now,
                "last_contact": "just now",
                "status": "Active Lead",
                "stage": "New Inquiry",
                "score": adjust_score(template.score, self.rnd),
                "conversation_id": None,
            }
        )
        notification = DemoNotification(
            id=self.new_id(),
            title="Sample lead entered",
            detail=f"{lead.name} arrived via {lead.source}.",
            timestamp=now,
        )
        self._update(
            "add_lead_from_library",
            leads=[lead, *self._state.leads],
            notifications=[notification, *self._state.notifications][:NOTIFICATION_LIMIT],
        )
        return lead

    def create_lead(self, payload: LeadCreate | Mapping[str, Any]) -> DemoLead:
        """Capture a new lead. The caller is responsible for rejecting blank names."""
        if not isinstance(payload, LeadCreate):
            payload = LeadCreate(**payload)

        lead = DemoLead(
            id=self.new_id(),
            name=payload.name,
            email=payload.email or "",
            phone=payload.phone or "",
            source=payload.source,
            location=payload.location,
            budget=payload.budget,
            timeline=payload.timeline,
            notes=payload.notes,
            status="Active Lead",
            stage="Discovery",
            last_contact="just now",
            score=adjust_score(NEW_LEAD_BASE_SCORE, self.rnd),
            created_at=self._now(),
        )
        self._update("create_lead", leads=[lead, *self._state.leads])
        logger.info("Created lead id=%s name=%s", lead.id, lead.name)
        return lead

    def update_lead(self, lead_id: str, updates: Mapping[str, Any]) -> Optional[DemoLead]:
        current = self._state.find_lead(lead_id)
        if current is None:
            return None

        changes: Dict[str, Any] = {
            k: v for k, v in updates.items() if k != "id" and k in DemoLead.model_fields
        }
        updated = current.model_copy(update=changes)
        leads = [updated if lead.id == lead_id else lead for lead in self._state.leads]
        self._update("update_lead", leads=leads)
        return updated

    def delete_lead(self, lead_id: str) -> None:
        if self._state.find_lead(lead_id) is None:
            return
        leads = [lead for lead in self._state.leads if lead.id != lead_id]
        self._update("delete_lead", leads=leads)
        logger.info("Deleted lead id=%s", lead_id)

    # ------------------------------------------------------------------
    # Follow-up draft (one at a time, store-wide)
    # ------------------------------------------------------------------

    def prepare_follow_up(self, lead_id: str) -> Optional[FollowUpDraft]:
        lead = self._state.find_lead(lead_id)
        if lead is None:
            return None
        draft = FollowUpDraft(
            lead_id=lead_id,
            content=compose_follow_up_draft(lead),
            generated_at=self._now(),
        )
        self._update("prepare_follow_up", follow_up_draft=draft)
        return draft

    def clear_follow_up_draft(self) -> None:
        self._update("clear_follow_up_draft", follow_up_draft=None)

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    def open_conversation(self, conversation_id: str) -> None:
        conversations = [
            c.model_copy(update={"unread": False}) if c.id == conversation_id else c
            for c in self._state.conversations
        ]
        self._update(
            "open_conversation",
            active_conversation_id=conversation_id,
            conversations=conversations,
        )

    def _append_message(
        self,
        conversation_id: str,
        body: str,
        sender: str,
        mark_unread: bool,
        action: str,
    ) -> Optional[ConversationMessage]:
        if self._state.find_conversation(conversation_id) is None:
            return None

        message = ConversationMessage(
            id=self.new_id(),
            sender=sender,
            body=body,
            timestamp=self._now(),
        )
        conversations = []
        for conversation in self._state.conversations:
            if conversation.id == conversation_id:
                changes: Dict[str, Any] = {"messages": [*conversation.messages, message]}
                if mark_unread:
                    changes["unread"] = True
                conversation = conversation.model_copy(update=changes)
            conversations.append(conversation)

        self._update(action, conversations=conversations)
        return message

    def append_conversation_message(
        self,
        conversation_id: str,
        body: str,
        sender: str = "agent",
    ) -> Optional[ConversationMessage]:
        return self._append_message(
            conversation_id, body, sender, False, "append_conversation_message"
        )

    def inject_client_conversation_message(
        self,
        conversation_id: str,
        body: str,
    ) -> Optional[ConversationMessage]:
        return self._append_message(
            conversation_id, body, "client", True, "inject_client_conversation_message"
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def randomize_property(self) -> Optional[DemoProperty]:
        if not PROPERTY_LIBRARY:
            return None
        prop = self.rnd.choice(PROPERTY_LIBRARY)
        self._update("randomize_property", active_property=prop)
        return prop

    def set_active_property(self, property_id: str) -> Optional[DemoProperty]:
        prop = next((p for p in PROPERTY_LIBRARY if p.id == property_id), None)
        if prop is None:
            return None
        self._update("set_active_property", active_property=prop)
        return prop

    def reset_active_property(self) -> None:
        self._update(
            "reset_active_property",
            active_property=PROPERTY_LIBRARY[0] if PROPERTY_LIBRARY else None,
        )

    # ------------------------------------------------------------------
    # Documents / deals / marketing
    # ------------------------------------------------------------------

    def add_document_placeholder(self, title: str, property: Optional[str] = None) -> DemoDocument:
        document = DemoDocument(
            id=self.new_id(),
            title=title,
            property=property or "Demo Upload",
            size="Processing",
            uploaded_at=self._now(),
            status="processing",
        )
        self._update("add_document_placeholder", documents=[document, *self._state.documents])
        return document

    def mark_document_ready(self, document_id: str) -> Optional[DemoDocument]:
        """Promote a processing placeholder. Nothing promotes documents automatically."""
        target = next((d for d in self._state.documents if d.id == document_id), None)
        if target is None:
            return None
        ready = target.model_copy(update={"status": "ready"})
        documents = [ready if d.id == document_id else d for d in self._state.documents]
        self._update("mark_document_ready", documents=documents)
        return ready

    def remove_document(self, document_id: str) -> None:
        documents = [d for d in self._state.documents if d.id != document_id]
        if len(documents) == len(self._state.documents):
            return
        self._update("remove_document", documents=documents)

    def archive_deal(self, deal_id: str) -> None:
        deals = [deal for deal in self._state.deals if deal.id != deal_id]
        if len(deals) == len(self._state.deals):
            return
        self._update("archive_deal", deals=deals)
        logger.info("Archived deal id=%s", deal_id)

    def add_marketing_asset(self, asset: MarketingPost) -> None:
        posts = [asset, *self._state.posts][:MARKETING_POST_LIMIT]
        self._update("add_marketing_asset", posts=posts)

    def remove_marketing_asset(self, title: str) -> None:
        posts = [post for post in self._state.posts if post.title != title]
        if len(posts) == len(self._state.posts):
            return
        self._update("remove_marketing_asset", posts=posts)

    # ------------------------------------------------------------------
    # Scheduled follow-up rows (lifecycle lives in FollowUpTimer)
    # ------------------------------------------------------------------

    def add_scheduled_follow_up(self, item: ScheduledFollowUp) -> None:
        self._update(
            "add_scheduled_follow_up",
            scheduled_follow_ups=[*self._state.scheduled_follow_ups, item],
        )

    def set_follow_up_status(
        self,
        follow_up_id: str,
        status: FollowUpStatus,
        scheduled_for: Optional[datetime] = None,
    ) -> Optional[ScheduledFollowUp]:
        current = self._state.find_follow_up(follow_up_id)
        if current is None:
            return None
        changes: Dict[str, Any] = {"status": status}
        if scheduled_for is not None:
            changes["scheduled_for"] = scheduled_for
        updated = current.model_copy(update=changes)
        items = [
            updated if item.id == follow_up_id else item
            for item in self._state.scheduled_follow_ups
        ]
        self._update("set_follow_up_status", scheduled_follow_ups=items)
        return updated

    def remove_scheduled_follow_up(self, follow_up_id: str) -> bool:
        items = [item for item in self._state.scheduled_follow_ups if item.id != follow_up_id]
        if len(items) == len(self._state.scheduled_follow_ups):
            return False
        self._update("remove_scheduled_follow_up", scheduled_follow_ups=items)
        return True
