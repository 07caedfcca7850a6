from __future__ import annotations

from realty_demo.schemas.demo import DemoLead


def compose_follow_up_draft(lead: DemoLead) -> str:
    """Concierge-tone follow-up built from what we know about the lead."""
    sentences = [
        f"Hi {lead.first_name}, just circling back on your search in {lead.location}.",
        f"I penciled in options that match your {lead.timeline} timeline." if lead.timeline else "",
        f"Highlights from my notes: {lead.notes}" if lead.notes else "",
        "Let me know if you would like fresh tours or refined comps and I will "
        "arrange everything this afternoon.",
    ]
    return " ".join(s for s in sentences if s)


def compose_quick_message(lead: DemoLead) -> str:
    """Short text used for instant and scheduled outreach."""
    location = lead.location or "your target area"
    return (
        f"Hi {lead.first_name}, I just unlocked fresh homes in {location}. "
        f"They line up with your {lead.timeline.lower()} move window. "
        "Want me to fast-track a private tour?"
    )
