"""
Tests for simulated client replies.
"""
from realty_demo.services.conversation_simulator import CANNED_CLIENT_REPLIES

CONVERSATION_ID = "conv-marcus-reed"


def test_reply_arrives_after_typing_delay(simulator, scheduler):
    store = simulator.store
    before = len(store.state.find_conversation(CONVERSATION_ID).messages)

    sent = simulator.send_agent_message(CONVERSATION_ID, "Tour slots are open Friday.")

    assert sent.sender == "agent"
    assert simulator.is_typing(CONVERSATION_ID)

    scheduler.advance(1.4)
    assert len(store.state.find_conversation(CONVERSATION_ID).messages) == before + 1

    scheduler.advance(0.1)
    conv = store.state.find_conversation(CONVERSATION_ID)
    assert len(conv.messages) == before + 2
    assert conv.messages[-1].sender == "client"
    assert conv.messages[-1].body in CANNED_CLIENT_REPLIES
    assert conv.unread is True
    assert not simulator.is_typing(CONVERSATION_ID)
    assert store.state.notifications[0].title == "Client replied"
    assert store.state.notifications[0].detail == "Marcus Reed responded automatically."


def test_reply_choice_follows_random_source(simulator, scheduler):
    import random

    expected = random.Random(7).choice(CANNED_CLIENT_REPLIES)

    simulator.send_agent_message(CONVERSATION_ID, "Checking in.")
    scheduler.advance(1.5)

    assert simulator.store.state.find_conversation(CONVERSATION_ID).messages[-1].body == expected


def test_unknown_conversation_schedules_nothing(simulator, scheduler):
    assert simulator.send_agent_message("conv-missing", "hello?") is None
    assert scheduler.pending_tasks() == []


def test_reply_can_be_skipped(simulator, scheduler):
    simulator.send_agent_message(CONVERSATION_ID, "FYI only.", simulate_reply=False)
    assert not simulator.is_typing(CONVERSATION_ID)
    assert scheduler.pending_tasks() == []


def test_cancel_pending_drops_queued_replies(simulator, scheduler):
    store = simulator.store
    simulator.send_agent_message(CONVERSATION_ID, "One")
    count = len(store.state.find_conversation(CONVERSATION_ID).messages)

    assert simulator.cancel_pending() == 1
    scheduler.advance(5)

    assert len(store.state.find_conversation(CONVERSATION_ID).messages) == count


def test_reply_is_dropped_if_conversation_disappears(simulator, scheduler):
    store = simulator.store
    simulator.send_agent_message(CONVERSATION_ID, "Still there?")
    store.clear_sample_data()

    scheduler.advance(1.5)

    assert store.state.conversations == []
    assert store.state.notifications == []
