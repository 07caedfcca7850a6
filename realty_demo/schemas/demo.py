from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Sender = Literal["agent", "client", "assistant"]
ChatRole = Literal["user", "assistant"]
DocumentStatus = Literal["processing", "ready"]
FollowUpStatus = Literal["pending", "sent", "snoozed"]


# ---------------------------------------------------------------------------
# Static library records
# ---------------------------------------------------------------------------

class DemoProperty(BaseModel):
    id: str
    title: str
    address: str
    price: str
    bedrooms: int
    bathrooms: float
    description: str
    highlights: List[str] = Field(default_factory=list)
    gallery: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Pipeline records
# ---------------------------------------------------------------------------

class DemoLead(BaseModel):
    id: str
    name: str
    email: str = ""
    phone: str = ""
    source: str = ""
    location: str = ""
    budget: str = ""
    timeline: str = ""
    notes: str = ""
    score: int = Field(default=0, ge=0, le=100)
    status: str = "Active Lead"
    stage: str = "Discovery"
    last_contact: str = "just now"
    created_at: datetime
    conversation_id: Optional[str] = None

    @property
    def first_name(self) -> str:
        parts = self.name.split(" ")
        return parts[0] if parts and parts[0] else "there"


class ConversationMessage(BaseModel):
    id: str
    sender: Sender
    body: str
    timestamp: datetime


class DemoConversation(BaseModel):
    id: str
    client_name: str
    lead_id: Optional[str] = None
    property: str = ""
    unread: bool = False
    messages: List[ConversationMessage] = Field(default_factory=list)


class DemoDeal(BaseModel):
    id: str
    property: str
    buyer: str
    seller: str
    price: str
    commission: str
    closed_on: str
    neighborhood: str


class DemoDocument(BaseModel):
    id: str
    title: str
    property: str
    size: str
    uploaded_at: datetime
    status: DocumentStatus = "processing"


class MarketingPost(BaseModel):
    platform: str
    title: str
    caption: str
    hashtags: str


class DemoNotification(BaseModel):
    id: str
    title: str
    detail: str
    timestamp: datetime


class FeedMessage(BaseModel):
    """Flattened message feed shown on the dashboard."""

    sender: str
    text: str


class ChatMessage(BaseModel):
    role: ChatRole
    content: str


class FollowUpDraft(BaseModel):
    lead_id: str
    content: str
    generated_at: datetime


class ScheduledFollowUp(BaseModel):
    id: str
    lead_id: str
    lead_name: str
    conversation_id: Optional[str] = None
    scheduled_for: datetime
    status: FollowUpStatus = "pending"
    message: str
    delay: str


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------

class DemoState(BaseModel):
    """
    Entire simulated business state.

    Treated as immutable: the store replaces it wholesale on every mutation.
    """

    is_sample_mode: bool = False
    automation_enabled: bool = True
    leads: List[DemoLead] = Field(default_factory=list)
    posts: List[MarketingPost] = Field(default_factory=list)
    messages: List[FeedMessage] = Field(default_factory=list)
    chat: List[ChatMessage] = Field(default_factory=list)
    documents: List[DemoDocument] = Field(default_factory=list)
    deals: List[DemoDeal] = Field(default_factory=list)
    conversations: List[DemoConversation] = Field(default_factory=list)
    active_conversation_id: Optional[str] = None
    insight: str = ""
    notifications: List[DemoNotification] = Field(default_factory=list)
    active_property: Optional[DemoProperty] = None
    follow_up_draft: Optional[FollowUpDraft] = None
    scheduled_follow_ups: List[ScheduledFollowUp] = Field(default_factory=list)

    def find_lead(self, lead_id: str) -> Optional[DemoLead]:
        return next((lead for lead in self.leads if lead.id == lead_id), None)

    def find_conversation(self, conversation_id: str) -> Optional[DemoConversation]:
        return next((c for c in self.conversations if c.id == conversation_id), None)

    def find_follow_up(self, follow_up_id: str) -> Optional[ScheduledFollowUp]:
        return next(
            (item for item in self.scheduled_follow_ups if item.id == follow_up_id),
            None,
        )


# ---------------------------------------------------------------------------
# Request payloads (page layer)
# ---------------------------------------------------------------------------

class LeadCreate(BaseModel):
    name: str = Field(..., description="Lead full name; must not be blank.")
    email: Optional[str] = None
    phone: Optional[str] = None
    source: str = "Website"
    location: str = ""
    budget: str = ""
    timeline: str = "60 days"
    notes: str = ""


class LeadUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    source: Optional[str] = None
    location: Optional[str] = None
    budget: Optional[str] = None
    timeline: Optional[str] = None
    notes: Optional[str] = None
    stage: Optional[str] = None
    status: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=0, le=100)
    last_contact: Optional[str] = None


class MessageCreate(BaseModel):
    body: str = Field(..., min_length=1)
    sender: Literal["agent", "assistant"] = "agent"
    simulate_reply: bool = True


class ClientMessageCreate(BaseModel):
    body: str = Field(..., min_length=1)


class FollowUpSchedule(BaseModel):
    lead_id: str
    delay: str = "1 hour"


class FollowUpSnooze(BaseModel):
    delay: str = "1 day"


class DocumentCreate(BaseModel):
    title: str = Field(..., min_length=1)
    property: Optional[str] = None


class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1)
    detail: str = ""
    timestamp: Optional[datetime] = None


class InsightUpdate(BaseModel):
    insight: str


class ChatCreate(BaseModel):
    role: ChatRole = "user"
    content: str = Field(..., min_length=1)


class AutomationToggle(BaseModel):
    enabled: bool


class ActivePropertySelect(BaseModel):
    property_id: str
