"""
Tests for scheduled follow-ups.
"""
from datetime import timedelta

import pytest

from realty_demo.services.follow_up_timer import DELAY_HOURS, countdown, delay_to_hours

LEAD_ID = "lead-olivia-chen"
CONVERSATION_ID = "conv-olivia-chen"


def _messages(store, conversation_id=CONVERSATION_ID):
    return store.state.find_conversation(conversation_id).messages


class TestSchedule:
    def test_one_day_delay_is_pending_twenty_four_hours_out(self, follow_ups, clock):
        item = follow_ups.schedule(LEAD_ID, "1 day")

        assert item.status == "pending"
        assert item.scheduled_for == clock.now() + timedelta(hours=24)
        assert item.lead_name == "Olivia Chen"
        assert item.conversation_id == CONVERSATION_ID
        assert item.id.startswith(f"followup-{LEAD_ID}-")
        assert follow_ups.store.state.scheduled_follow_ups[-1] == item

    @pytest.mark.parametrize("delay,hours", sorted(DELAY_HOURS.items()))
    def test_delay_table(self, delay, hours):
        assert delay_to_hours(delay) == hours

    def test_unknown_delay_defaults_to_a_day(self, follow_ups, clock):
        item = follow_ups.schedule(LEAD_ID, "next full moon")
        assert item.scheduled_for == clock.now() + timedelta(hours=24)

    def test_unknown_lead_schedules_nothing(self, follow_ups):
        assert follow_ups.schedule("lead-missing", "1 hour") is None
        assert follow_ups.store.state.scheduled_follow_ups == []

    def test_ids_stay_unique_within_the_same_millisecond(self, follow_ups):
        first = follow_ups.schedule(LEAD_ID, "1 hour")
        second = follow_ups.schedule(LEAD_ID, "1 hour")
        assert first.id != second.id

    def test_message_is_frozen_at_schedule_time(self, follow_ups):
        item = follow_ups.schedule(LEAD_ID, "4 hours")

        follow_ups.store.update_lead(LEAD_ID, {"location": "Malibu"})

        stored = follow_ups.store.state.find_follow_up(item.id)
        assert "Brentwood" in stored.message
        assert "Malibu" not in stored.message


class TestCancel:
    def test_cancel_removes_item(self, follow_ups):
        item = follow_ups.schedule(LEAD_ID, "1 hour")

        assert follow_ups.cancel(item.id) is True
        assert follow_ups.store.state.find_follow_up(item.id) is None
        assert follow_ups.cancel(item.id) is False


class TestSend:
    def test_send_marks_sent_appends_once_then_clears(self, follow_ups, scheduler):
        store = follow_ups.store
        item = follow_ups.schedule(LEAD_ID, "1 day")
        before = len(_messages(store))

        sent = follow_ups.send(item.id)

        assert sent.status == "sent"
        assert store.state.find_follow_up(item.id).status == "sent"
        assert len(_messages(store)) == before + 1
        assert _messages(store)[-1].body == item.message
        assert _messages(store)[-1].sender == "agent"

        scheduler.advance(2.9)
        assert store.state.find_follow_up(item.id) is not None

        scheduler.advance(0.2)
        assert store.state.find_follow_up(item.id) is None
        assert len(_messages(store)) == before + 1

    def test_sending_twice_appends_once(self, follow_ups):
        store = follow_ups.store
        item = follow_ups.schedule(LEAD_ID, "1 hour")
        before = len(_messages(store))

        follow_ups.send(item.id)
        assert follow_ups.send(item.id) is None
        assert len(_messages(store)) == before + 1

    def test_send_follows_stable_link_after_lead_rename(self, follow_ups):
        store = follow_ups.store
        item = follow_ups.schedule(LEAD_ID, "1 hour")
        store.update_lead(LEAD_ID, {"name": "Olivia Chen-Park"})
        before = len(_messages(store))

        follow_ups.send(item.id)

        assert len(_messages(store)) == before + 1

    def test_lead_without_conversation_sends_without_appending(self, follow_ups):
        store = follow_ups.store
        item = follow_ups.schedule("lead-priya-nair", "1 hour")
        totals = [len(c.messages) for c in store.state.conversations]

        assert follow_ups.send(item.id).status == "sent"
        assert [len(c.messages) for c in store.state.conversations] == totals

    def test_paused_automation_blocks_send(self, follow_ups):
        store = follow_ups.store
        item = follow_ups.schedule(LEAD_ID, "1 hour")
        store.set_automation_enabled(False)

        assert follow_ups.send(item.id) is None
        assert store.state.find_follow_up(item.id).status == "pending"

    def test_cancel_after_send_stops_the_clear_task(self, follow_ups, scheduler):
        item = follow_ups.schedule(LEAD_ID, "1 hour")
        follow_ups.send(item.id)

        follow_ups.cancel(item.id)

        assert scheduler.pending_tasks() == []


class TestSnoozeAndCountdown:
    def test_snooze_moves_schedule(self, follow_ups, clock):
        item = follow_ups.schedule(LEAD_ID, "1 hour")

        snoozed = follow_ups.snooze(item.id, "2 days")

        assert snoozed.status == "snoozed"
        assert snoozed.scheduled_for == clock.now() + timedelta(hours=48)
        assert follow_ups.send(item.id).status == "sent"

    def test_snooze_unknown_or_sent_is_ignored(self, follow_ups):
        assert follow_ups.snooze("missing", "1 day") is None
        item = follow_ups.schedule(LEAD_ID, "1 hour")
        follow_ups.send(item.id)
        assert follow_ups.snooze(item.id, "1 day") is None

    def test_countdown_labels(self, follow_ups, clock):
        hourly = follow_ups.schedule(LEAD_ID, "4 hours")
        weekly = follow_ups.schedule(LEAD_ID, "1 week")

        assert countdown(hourly, clock.now()).remaining == "4 hours"
        assert countdown(weekly, clock.now()).remaining == "7 days"
        assert countdown(hourly, clock.now()).label == "Scheduled"

        clock.advance(5 * 3600)
        assert countdown(hourly, clock.now()).label == "Overdue"

        sent = follow_ups.send(weekly.id)
        assert countdown(sent, clock.now()).label == "Sent"
