"""
Tests for the sample-mode state store.
"""
import random

import pytest

from realty_demo.schemas.demo import MarketingPost
from realty_demo.services.demo_store import (
    MARKETING_POST_LIMIT,
    NOTIFICATION_LIMIT,
    adjust_score,
)


class TestSampleData:
    def test_load_sample_data_populates_every_surface(self, store):
        store.clear_sample_data()
        store.load_sample_data()

        state = store.state
        assert state.is_sample_mode is True
        assert state.leads
        assert state.deals
        assert state.conversations
        assert any(c.messages for c in state.conversations)
        assert state.active_conversation_id == state.conversations[0].id

    def test_clear_sample_data_empties_lists_and_leaves_sample_mode(self, store):
        store.clear_sample_data()

        state = store.state
        assert state.is_sample_mode is False
        assert state.leads == []
        assert state.deals == []
        assert state.documents == []
        assert state.posts == []
        assert state.active_property is not None

    def test_reset_discards_edits(self, store, sample_lead_payload):
        lead = store.create_lead(sample_lead_payload)
        store.archive_deal(store.state.deals[0].id)

        store.reset_demo_data()

        assert store.state.find_lead(lead.id) is None
        assert len(store.state.deals) == 4

    def test_conversation_ids_are_stable_across_reset(self, store):
        before = [c.id for c in store.state.conversations]
        store.reset_demo_data()
        assert [c.id for c in store.state.conversations] == before

    def test_emptying_the_pipeline_in_sample_mode_reseeds(self, store):
        state = store.state
        for lead in state.leads:
            store.delete_lead(lead.id)
        for deal in state.deals:
            store.archive_deal(deal.id)
        for doc in state.documents:
            store.remove_document(doc.id)
        for post in state.posts:
            store.remove_marketing_asset(post.title)

        assert store.state.leads
        assert store.state.deals


class TestLeads:
    def test_create_lead_prepends_with_discovery_stage(self, store, sample_lead_payload):
        lead = store.create_lead(sample_lead_payload)

        assert store.state.leads[0].id == lead.id
        assert lead.stage == "Discovery"
        assert lead.status == "Active Lead"
        assert lead.last_contact == "just now"
        assert lead.created_at == store.clock.now()

    def test_create_lead_score_uses_injected_random_source(self, store, sample_lead_payload):
        expected = adjust_score(82, random.Random(7))
        lead = store.create_lead(sample_lead_payload)
        assert lead.score == expected

    @pytest.mark.parametrize("base,low,high", [(10, 55, 55), (200, 99, 99), (82, 77, 86)])
    def test_adjust_score_is_clamped(self, base, low, high):
        rnd = random.Random(1)
        for _ in range(200):
            assert low <= adjust_score(base, rnd) <= high

    def test_create_then_delete_restores_lead_list(self, store, sample_lead_payload):
        before = [lead.id for lead in store.state.leads]

        lead = store.create_lead(sample_lead_payload)
        store.delete_lead(lead.id)

        assert [lead.id for lead in store.state.leads] == before

    def test_missing_ids_are_silent_no_ops(self, store):
        before = store.snapshot()
        notified = []
        store.subscribe(notified.append)

        store.update_lead("does-not-exist", {"name": "Ghost"})
        store.delete_lead("does-not-exist")

        assert store.state == before
        assert notified == []

    def test_update_lead_merges_fields_but_keeps_id(self, store):
        lead = store.state.leads[0]

        updated = store.update_lead(lead.id, {"id": "hijack", "budget": "$12M", "bogus": 1})

        assert updated.id == lead.id
        assert updated.budget == "$12M"
        assert updated.name == lead.name
        assert store.state.find_lead(lead.id).budget == "$12M"

    def test_add_lead_from_library_only_in_sample_mode(self, store):
        count = len(store.state.leads)

        lead = store.add_lead_from_library()

        assert lead is not None
        assert lead.stage == "New Inquiry"
        assert 55 <= lead.score <= 99
        assert len(store.state.leads) == count + 1
        assert store.state.notifications[0].title == "Sample lead entered"

        store.clear_sample_data()
        assert store.add_lead_from_library() is None
        assert store.state.leads == []


class TestFollowUpDraft:
    def test_draft_mentions_first_name_and_location(self, store):
        lead = store.state.find_lead("lead-olivia-chen")

        draft = store.prepare_follow_up(lead.id)

        assert "Olivia" in draft.content
        assert lead.location in draft.content
        assert lead.timeline in draft.content
        assert lead.notes in draft.content
        assert store.state.follow_up_draft == draft

    def test_only_one_draft_is_kept(self, store):
        store.prepare_follow_up("lead-olivia-chen")
        store.prepare_follow_up("lead-marcus-reed")

        assert store.state.follow_up_draft.lead_id == "lead-marcus-reed"

    def test_draft_skips_empty_notes(self, store):
        draft = store.prepare_follow_up("lead-priya-nair")
        assert "Highlights from my notes" not in draft.content

    def test_unknown_lead_keeps_existing_draft(self, store):
        store.prepare_follow_up("lead-olivia-chen")
        assert store.prepare_follow_up("nope") is None
        assert store.state.follow_up_draft.lead_id == "lead-olivia-chen"

        store.clear_follow_up_draft()
        assert store.state.follow_up_draft is None


class TestConversations:
    def test_inject_client_message_marks_unread_and_appends_last(self, store):
        conv = store.state.find_conversation("conv-marcus-reed")
        assert conv.unread is False

        message = store.inject_client_conversation_message(conv.id, "Can we tour Friday?")

        updated = store.state.find_conversation(conv.id)
        assert updated.unread is True
        assert updated.messages[-1] == message
        assert message.sender == "client"
        assert len(updated.messages) == len(conv.messages) + 1

    def test_inject_into_unknown_conversation_changes_nothing(self, store):
        before = store.snapshot()
        assert store.inject_client_conversation_message("conv-missing", "hello") is None
        assert store.state == before

    def test_append_agent_message_leaves_unread_flag(self, store):
        store.append_conversation_message("conv-marcus-reed", "Sending comps now.", "agent")

        conv = store.state.find_conversation("conv-marcus-reed")
        assert conv.unread is False
        assert conv.messages[-1].sender == "agent"

    def test_open_conversation_clears_unread(self, store):
        store.open_conversation("conv-olivia-chen")

        assert store.state.active_conversation_id == "conv-olivia-chen"
        assert store.state.find_conversation("conv-olivia-chen").unread is False

    def test_message_timestamps_do_not_go_backwards(self, store, clock):
        store.append_conversation_message("conv-sofia-alvarez", "first", "agent")
        clock.advance(60)
        store.append_conversation_message("conv-sofia-alvarez", "second", "assistant")

        stamps = [m.timestamp for m in store.state.find_conversation("conv-sofia-alvarez").messages]
        assert stamps == sorted(stamps)


class TestNotificationsAndAssets:
    def test_notifications_are_capped_newest_first(self, store):
        for idx in range(NOTIFICATION_LIMIT + 3):
            store.add_notification(f"n{idx}", "detail")

        titles = [n.title for n in store.state.notifications]
        assert len(titles) == NOTIFICATION_LIMIT
        assert titles[0] == f"n{NOTIFICATION_LIMIT + 2}"

    def test_marketing_assets_capped_and_removed_by_title(self, store):
        for idx in range(MARKETING_POST_LIMIT + 5):
            store.add_marketing_asset(
                MarketingPost(platform="Instagram", title=f"Post {idx}", caption="c", hashtags="#x")
            )
        assert len(store.state.posts) == MARKETING_POST_LIMIT

        store.remove_marketing_asset("Post 54")
        assert all(post.title != "Post 54" for post in store.state.posts)

    def test_document_placeholder_starts_processing_until_promoted(self, store):
        doc = store.add_document_placeholder("Sample Disclosure 1.pdf")

        assert store.state.documents[0] == doc
        assert doc.status == "processing"
        assert doc.property == "Demo Upload"
        assert doc.size == "Processing"

        ready = store.mark_document_ready(doc.id)
        assert ready.status == "ready"
        assert store.mark_document_ready("missing") is None

    def test_archive_deal_is_a_hard_delete(self, store):
        deal_id = store.state.deals[0].id
        store.archive_deal(deal_id)
        assert all(deal.id != deal_id for deal in store.state.deals)

    def test_property_selection(self, store):
        prop = store.set_active_property("prop-aspen-lodge")
        assert store.state.active_property == prop

        assert store.set_active_property("prop-missing") is None
        assert store.state.active_property == prop

        store.reset_active_property()
        assert store.state.active_property.id == store.property_library[0].id

        assert store.randomize_property() in store.property_library

    def test_insight_and_chat(self, store):
        store.set_insight("Focus on Aspen this week.")
        store.append_assistant_chat("user", "Who is hottest?")

        assert store.state.insight == "Focus on Aspen this week."
        assert store.state.chat[-1].content == "Who is hottest?"
