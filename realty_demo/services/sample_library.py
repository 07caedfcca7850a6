from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List

from realty_demo.schemas.demo import (
    ChatMessage,
    ConversationMessage,
    DemoConversation,
    DemoDeal,
    DemoDocument,
    DemoLead,
    DemoNotification,
    DemoProperty,
    DemoState,
    FeedMessage,
    MarketingPost,
)

logger = logging.getLogger("realty_demo.sample_library")


# =========================================================
# PROPERTY LIBRARY
# =========================================================

PROPERTY_LIBRARY: List[DemoProperty] = [
    DemoProperty(
        id="prop-brentwood-glass",
        title="Brentwood Glass Pavilion",
        address="1180 N Bundy Dr, Los Angeles, CA",
        price="$8,950,000",
        bedrooms=5,
        bathrooms=6.5,
        description="Floor-to-ceiling glass, canyon views, and a 60-foot infinity pool.",
        highlights=["Infinity pool", "Wine gallery", "Smart-home automation", "Guest casita"],
        gallery=["/images/brentwood-1.jpg", "/images/brentwood-2.jpg"],
    ),
    DemoProperty(
        id="prop-miami-bayfront",
        title="Bayfront Sky Residence",
        address="900 Brickell Key Blvd PH4, Miami, FL",
        price="$6,400,000",
        bedrooms=4,
        bathrooms=4.5,
        description="Full-floor penthouse with wraparound terraces over Biscayne Bay.",
        highlights=["Private elevator", "Wraparound terrace", "Marina access"],
        gallery=["/images/miami-1.jpg", "/images/miami-2.jpg"],
    ),
    DemoProperty(
        id="prop-aspen-lodge",
        title="Red Mountain Lodge",
        address="412 Willoughby Way, Aspen, CO",
        price="$12,750,000",
        bedrooms=6,
        bathrooms=7.0,
        description="Ski-in timber lodge with heated terraces and a spa level.",
        highlights=["Ski access", "Spa level", "Heated driveway"],
        gallery=["/images/aspen-1.jpg"],
    ),
    DemoProperty(
        id="prop-austin-modern",
        title="Lake Austin Modern",
        address="3215 Westlake Dr, Austin, TX",
        price="$4,250,000",
        bedrooms=4,
        bathrooms=4.0,
        description="Waterfront modern with a boat dock and hill-country sunsets.",
        highlights=["Boat dock", "Outdoor kitchen", "Home office"],
        gallery=["/images/austin-1.jpg", "/images/austin-2.jpg"],
    ),
    DemoProperty(
        id="prop-scottsdale-villa",
        title="Desert Mountain Villa",
        address="10040 E Happy Valley Rd, Scottsdale, AZ",
        price="$3,100,000",
        bedrooms=4,
        bathrooms=3.5,
        description="Courtyard villa on the 14th fairway with mountain views.",
        highlights=["Golf frontage", "Courtyard pool", "Casita"],
        gallery=["/images/scottsdale-1.jpg"],
    ),
]


# =========================================================
# LEAD LIBRARY
# =========================================================

_LEAD_SEEDS: List[Dict[str, Any]] = [
    {
        "id": "lead-olivia-chen",
        "name": "Olivia Chen",
        "email": "olivia.chen@example.com",
        "phone": "(310) 555-0142",
        "source": "Zillow Premier",
        "location": "Brentwood",
        "budget": "$8M - $10M",
        "timeline": "30 days",
        "notes": "Wants a pool house and a quiet street for the kids.",
        "score": 94,
        "stage": "Touring",
        "last_contact": "2 hours ago",
        "age_hours": 6,
        "conversation_id": "conv-olivia-chen",
    },
    {
        "id": "lead-marcus-reed",
        "name": "Marcus Reed",
        "email": "marcus@reedcapital.com",
        "phone": "(305) 555-0199",
        "source": "Instagram Ads",
        "location": "Miami",
        "budget": "$5M - $7M",
        "timeline": "60 days",
        "notes": "Relocating from NYC; needs marina access.",
        "score": 88,
        "stage": "Qualified",
        "last_contact": "yesterday",
        "age_hours": 20,
        "conversation_id": "conv-marcus-reed",
    },
    {
        "id": "lead-sofia-alvarez",
        "name": "Sofia Alvarez",
        "email": "sofia.alvarez@example.com",
        "phone": "(970) 555-0110",
        "source": "Referral",
        "location": "Aspen",
        "budget": "$11M - $14M",
        "timeline": "90 days",
        "notes": "Second home; ski-in access is a must.",
        "score": 81,
        "stage": "Discovery",
        "last_contact": "3 days ago",
        "age_hours": 52,
        "conversation_id": "conv-sofia-alvarez",
    },
    {
        "id": "lead-daniel-brooks",
        "name": "Daniel Brooks",
        "email": "dbrooks@example.com",
        "phone": "(512) 555-0175",
        "source": "Open House",
        "location": "Austin",
        "budget": "$3.5M - $4.5M",
        "timeline": "45 days",
        "notes": "Wants a dock and a dedicated studio.",
        "score": 76,
        "stage": "Nurture",
        "last_contact": "last week",
        "age_hours": 140,
        "conversation_id": "conv-daniel-brooks",
    },
    {
        "id": "lead-priya-nair",
        "name": "Priya Nair",
        "email": "priya.nair@example.com",
        "phone": "(480) 555-0133",
        "source": "Website",
        "location": "Scottsdale",
        "budget": "$2.5M - $3.2M",
        "timeline": "6 months",
        "notes": "",
        "score": 68,
        "stage": "New Inquiry",
        "last_contact": "just now",
        "age_hours": 1,
        "conversation_id": None,
    },
]


def _lead_from_seed(seed: Dict[str, Any], now: datetime) -> DemoLead:
    data = {k: v for k, v in seed.items() if k != "age_hours"}
    data["created_at"] = now - timedelta(hours=seed["age_hours"])
    return DemoLead(status="Active Lead", **data)


def build_lead_library(now: datetime) -> List[DemoLead]:
    return [_lead_from_seed(seed, now) for seed in _LEAD_SEEDS]


# =========================================================
# CONVERSATIONS
# =========================================================

_CONVERSATION_SEEDS: List[Dict[str, Any]] = [
    {
        "id": "conv-olivia-chen",
        "client_name": "Olivia Chen",
        "lead_id": "lead-olivia-chen",
        "property": "Brentwood Glass Pavilion",
        "unread": True,
        "messages": [
            ("client", "Loved the Brentwood photos. Is the pool house permitted as a guest suite?"),
            ("assistant", "Yes, it is fully permitted with its own bath. I can send the plans tonight."),
            ("agent", "Olivia, I can walk you through it Saturday at 10am if that works."),
            ("client", "Saturday works. Can we also see the casita?"),
        ],
    },
    {
        "id": "conv-marcus-reed",
        "client_name": "Marcus Reed",
        "lead_id": "lead-marcus-reed",
        "property": "Bayfront Sky Residence",
        "unread": False,
        "messages": [
            ("client", "What are the HOA dues on the Brickell Key penthouse?"),
            ("assistant", "Dues are $4,850/month and include marina concierge."),
            ("agent", "I also pulled two off-market options with deeper slips."),
        ],
    },
    {
        "id": "conv-sofia-alvarez",
        "client_name": "Sofia Alvarez",
        "lead_id": "lead-sofia-alvarez",
        "property": "Red Mountain Lodge",
        "unread": False,
        "messages": [
            ("client", "Is the lodge available for a February showing?"),
            ("agent", "It is. I will hold the second week for you."),
        ],
    },
    {
        "id": "conv-daniel-brooks",
        "client_name": "Daniel Brooks",
        "lead_id": "lead-daniel-brooks",
        "property": "Lake Austin Modern",
        "unread": False,
        "messages": [
            ("agent", "Daniel, the Westlake listing just dropped its price by $150k."),
            ("client", "Interesting. Does the dock fit a wake boat?"),
        ],
    },
]


def build_conversation_library(now: datetime) -> List[DemoConversation]:
    conversations: List[DemoConversation] = []
    for seed in _CONVERSATION_SEEDS:
        total = len(seed["messages"])
        messages = [
            ConversationMessage(
                id=f"{seed['id']}-msg-{idx + 1}",
                sender=sender,
                body=body,
                timestamp=now - timedelta(minutes=15 * (total - idx)),
            )
            for idx, (sender, body) in enumerate(seed["messages"])
        ]
        conversations.append(
            DemoConversation(
                id=seed["id"],
                client_name=seed["client_name"],
                lead_id=seed["lead_id"],
                property=seed["property"],
                unread=seed["unread"],
                messages=messages,
            )
        )
    return conversations


# =========================================================
# DEALS / DOCUMENTS / NOTIFICATIONS
# =========================================================

DEAL_HISTORY: List[DemoDeal] = [
    DemoDeal(
        id="deal-holmby-hills",
        property="Holmby Hills Estate",
        buyer="The Laurent Family Trust",
        seller="Westwood Holdings LLC",
        price="$14,200,000",
        commission="$355,000",
        closed_on="2024-09-12",
        neighborhood="Holmby Hills",
    ),
    DemoDeal(
        id="deal-coconut-grove",
        property="Coconut Grove Waterfront",
        buyer="Andre & Mia Costa",
        seller="Harbor Point Partners",
        price="$7,800,000",
        commission="$195,000",
        closed_on="2024-08-03",
        neighborhood="Coconut Grove",
    ),
    DemoDeal(
        id="deal-west-lake-hills",
        property="West Lake Hills Retreat",
        buyer="Jordan Patel",
        seller="Kim & Ava Harrow",
        price="$3,650,000",
        commission="$91,250",
        closed_on="2024-07-21",
        neighborhood="West Lake Hills",
    ),
    DemoDeal(
        id="deal-snowmass",
        property="Snowmass Slopeside Chalet",
        buyer="Northwind Family Office",
        seller="Elena Morozova",
        price="$9,400,000",
        commission="$235,000",
        closed_on="2024-06-30",
        neighborhood="Snowmass Village",
    ),
]

_DOCUMENT_SEEDS: List[Dict[str, Any]] = [
    {
        "id": "doc-brentwood-psa",
        "title": "Brentwood Purchase Agreement.pdf",
        "property": "Brentwood Glass Pavilion",
        "size": "2.4 MB",
        "age_hours": 4,
    },
    {
        "id": "doc-miami-disclosures",
        "title": "Bayfront Seller Disclosures.pdf",
        "property": "Bayfront Sky Residence",
        "size": "1.1 MB",
        "age_hours": 30,
    },
    {
        "id": "doc-aspen-inspection",
        "title": "Red Mountain Inspection Report.pdf",
        "property": "Red Mountain Lodge",
        "size": "5.8 MB",
        "age_hours": 72,
    },
]


def build_document_library(now: datetime) -> List[DemoDocument]:
    return [
        DemoDocument(
            id=seed["id"],
            title=seed["title"],
            property=seed["property"],
            size=seed["size"],
            uploaded_at=now - timedelta(hours=seed["age_hours"]),
            status="ready",
        )
        for seed in _DOCUMENT_SEEDS
    ]


_NOTIFICATION_SEEDS = [
    ("Tour confirmed", "Olivia Chen locked Saturday 10am at Brentwood.", 1),
    ("Contract redlines", "Bayfront counter-offer returned with two edits.", 5),
    ("Campaign ready", "Thursday luxury email blast is staged for review.", 26),
]


def build_notifications(now: datetime) -> List[DemoNotification]:
    return [
        DemoNotification(
            id=f"notif-seed-{idx + 1}",
            title=title,
            detail=detail,
            timestamp=now - timedelta(hours=age),
        )
        for idx, (title, detail, age) in enumerate(_NOTIFICATION_SEEDS)
    ]


DEMO_INSIGHT = (
    "Brentwood and Miami buyers are most engaged this week. Prioritize tours for "
    "Olivia Chen and send Marcus Reed the off-market marina options before Friday."
)


# =========================================================
# DERIVED COLLECTIONS
# =========================================================

def build_marketing_posts() -> List[MarketingPost]:
    return [
        MarketingPost(
            platform="Instagram" if idx % 2 == 0 else "LinkedIn",
            title=prop.title,
            caption=f"{prop.address} just hit the market. {prop.description}",
            hashtags="#LuxuryRealEstate #AIConcierge #DemoMode",
        )
        for idx, prop in enumerate(PROPERTY_LIBRARY[:4])
    ]


def build_feed_messages(conversations: List[DemoConversation]) -> List[FeedMessage]:
    """Last four messages of the primary conversation, labelled for the dashboard."""
    if not conversations:
        return []
    primary = conversations[0]
    labels = {"assistant": "AI Concierge", "agent": "You"}
    return [
        FeedMessage(
            sender=labels.get(message.sender, primary.client_name),
            text=message.body,
        )
        for message in primary.messages[-4:]
    ]


def build_assistant_chat() -> List[ChatMessage]:
    return [
        ChatMessage(role="user", content="Give me the overnight pipeline pulse."),
        ChatMessage(
            role="assistant",
            content=(
                "You are tracking 40 luxury leads with 12 ready for outreach, 4 contracts "
                "in review, and marketing assets staged for Thursday's blast."
            ),
        ),
        ChatMessage(
            role="user",
            content="Queue fresh follow-ups for the Brentwood and Miami buyers.",
        ),
        ChatMessage(
            role="assistant",
            content=(
                "Follow-ups drafted with concierge tone and synced to the messaging hub. "
                "Want me to add a seller nurture too?"
            ),
        ),
    ]


# =========================================================
# SNAPSHOTS
# =========================================================

def build_sample_state(now: datetime) -> DemoState:
    """Fresh seed snapshot with sample mode on."""
    conversations = build_conversation_library(now)
    state = DemoState(
        is_sample_mode=True,
        leads=build_lead_library(now),
        posts=build_marketing_posts(),
        messages=build_feed_messages(conversations),
        chat=build_assistant_chat(),
        documents=build_document_library(now),
        deals=[deal.model_copy() for deal in DEAL_HISTORY],
        conversations=conversations,
        active_conversation_id=conversations[0].id if conversations else None,
        insight=DEMO_INSIGHT,
        notifications=build_notifications(now),
        active_property=PROPERTY_LIBRARY[0] if PROPERTY_LIBRARY else None,
    )
    logger.debug(
        "Built sample state (leads=%d, deals=%d, conversations=%d)",
        len(state.leads),
        len(state.deals),
        len(state.conversations),
    )
    return state


def build_empty_state() -> DemoState:
    """Live-mode snapshot: no fabricated data."""
    return DemoState(
        is_sample_mode=False,
        active_property=PROPERTY_LIBRARY[0] if PROPERTY_LIBRARY else None,
    )
