"""
Tests for the Intent Store
==========================

Pending intent lifecycle, replay dispatch and the auth modal binding.
"""

import pytest

from virtuohub.shared.core import events
from virtuohub.shared.core.event_bus import EventBus
from virtuohub.shared.domain.intents import (
    IntentStore,
    add_comment_intent,
    cast_vote_intent,
    create_post_intent,
)


class TestPendingIntent:

    def test_starts_empty(self, intent_store):
        assert intent_store.intent is None
        assert not intent_store.has_intent

    def test_set_and_clear(self, intent_store):
        intent = cast_vote_intent("P1", 1)
        intent_store.set_intent(intent)
        assert intent_store.intent == intent
        intent_store.clear_intent()
        assert intent_store.intent is None

    def test_clear_is_idempotent(self, intent_store):
        intent_store.clear_intent()
        intent_store.clear_intent()
        assert intent_store.intent is None

    def test_set_none_clears(self, intent_store):
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.set_intent(None)
        assert not intent_store.has_intent

    def test_clear_then_replay_dispatches_nothing(self, intent_store, registry):
        """Clearing before replay leaves nothing to dispatch."""
        calls = []
        registry.register_replay_handlers(cast_vote=calls.append)
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.clear_intent()
        intent_store.replay_intent()
        assert calls == []

    def test_last_write_wins(self, intent_store, registry):
        calls = []
        registry.register_replay_handlers(cast_vote=calls.append)
        intent_store.set_intent(cast_vote_intent("P1", 0))
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.replay_intent()
        assert [p.option_index for p in calls] == [1]

    def test_overwrite_with_other_action(self, intent_store, registry):
        votes, comments = [], []
        registry.register_replay_handlers(cast_vote=votes.append, add_comment=comments.append)
        intent_store.set_intent(cast_vote_intent("P1", 0))
        intent_store.set_intent(add_comment_intent("post-1", "hello"))
        intent_store.replay_intent()
        assert votes == []
        assert len(comments) == 1


class TestReplay:

    def test_replay_without_intent_is_noop(self, intent_store, registry, notifier):
        calls = []
        registry.register_replay_handlers(cast_vote=calls.append)
        intent_store.replay_intent()
        assert calls == []
        assert notifier.toasts == []

    def test_replay_without_handlers_clears(self, intent_store, notifier):
        intent_store.set_intent(create_post_intent("general", "t", "b"))
        intent_store.replay_intent()
        assert intent_store.intent is None
        assert notifier.toasts == []

    def test_all_handlers_called_once_in_order(self, intent_store, registry):
        order = []
        for n in range(3):
            registry.register_replay_handlers(cast_vote=lambda payload, n=n: order.append(n))
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.replay_intent()
        assert order == [0, 1, 2]

    def test_handler_receives_payload(self, intent_store, registry):
        calls = []
        registry.register_replay_handlers(cast_vote=calls.append)
        intent = cast_vote_intent("P1", 1)
        intent_store.set_intent(intent)
        intent_store.replay_intent()
        assert calls == [intent.data]

    def test_only_matching_action_dispatched(self, intent_store, registry):
        votes, posts = [], []
        registry.register_replay_handlers(cast_vote=votes.append, create_post=posts.append)
        intent_store.set_intent(create_post_intent("general", "t", "b"))
        intent_store.replay_intent()
        assert votes == []
        assert len(posts) == 1

    def test_unregister_removes_only_that_handler(self, intent_store, registry):
        first, second = [], []
        unregister = registry.register_replay_handlers(cast_vote=first.append)
        registry.register_replay_handlers(cast_vote=second.append)
        unregister()
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.replay_intent()
        assert first == []
        assert len(second) == 1

    def test_intent_consumed_once(self, intent_store, registry):
        calls = []
        registry.register_replay_handlers(cast_vote=calls.append)
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.replay_intent()
        intent_store.replay_intent()
        assert len(calls) == 1


class TestReplayFailures:

    def test_raising_handler_clears_and_notifies_once(self, intent_store, registry, notifier):
        def boom(payload):
            raise RuntimeError("handler broke")

        registry.register_replay_handlers(cast_vote=boom)
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.replay_intent()
        assert intent_store.intent is None
        assert notifier.toasts == [
            {"title": "Action failed", "description": "Please try again.", "variant": "destructive"}
        ]

    def test_other_handlers_still_run(self, intent_store, registry, notifier):
        calls = []

        def boom(payload):
            raise ValueError("first one fails")

        registry.register_replay_handlers(cast_vote=boom)
        registry.register_replay_handlers(cast_vote=calls.append)
        registry.register_replay_handlers(cast_vote=boom)
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.replay_intent()
        assert len(calls) == 1
        assert len(notifier.toasts) == 1

    def test_custom_failure_message(self, registry, notifier):
        store = IntentStore(registry, notifier=notifier, failure_title="Oops", failure_description="Later")

        def boom(payload):
            raise RuntimeError

        registry.register_replay_handlers(add_comment=boom)
        store.set_intent(add_comment_intent("post-1", "x"))
        store.replay_intent()
        assert notifier.toasts[0]["title"] == "Oops"
        assert notifier.toasts[0]["description"] == "Later"

    def test_failure_without_notifier(self, registry):
        store = IntentStore(registry)

        def boom(payload):
            raise RuntimeError

        registry.register_replay_handlers(cast_vote=boom)
        store.set_intent(cast_vote_intent("P1", 0))
        store.replay_intent()
        assert store.intent is None

    def test_reentrant_replay_ignored(self, intent_store, registry):
        calls = []

        def reenter(payload):
            calls.append(payload)
            intent_store.replay_intent()

        registry.register_replay_handlers(cast_vote=reenter)
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.replay_intent()
        assert len(calls) == 1
        assert intent_store.intent is None

    def test_handler_may_set_new_intent(self, intent_store, registry):
        """The clear after dispatch wins over an intent set by a handler."""
        registry.register_replay_handlers(
            cast_vote=lambda payload: intent_store.set_intent(cast_vote_intent("P2", 0))
        )
        intent_store.set_intent(cast_vote_intent("P1", 1))
        intent_store.replay_intent()
        assert intent_store.intent is None


class TestRequestAuth:

    def test_without_controller_does_not_raise(self, intent_store):
        intent_store.request_auth()
        intent_store.request_auth("signup")

    def test_opens_modal_with_mode(self, intent_store, modal):
        intent_store.register_auth_modal_controller(modal)
        intent_store.request_auth()
        intent_store.request_auth("signup")
        assert modal.modes == ["signin", "signup"]

    def test_last_registration_wins(self, intent_store, modal):
        from conftest import RecordingModal

        replacement = RecordingModal()
        intent_store.register_auth_modal_controller(modal)
        intent_store.register_auth_modal_controller(replacement)
        intent_store.request_auth()
        assert modal.modes == []
        assert replacement.modes == ["signin"]

    def test_unknown_mode_rejected(self, intent_store, modal):
        intent_store.register_auth_modal_controller(modal)
        with pytest.raises(ValueError):
            intent_store.request_auth("magic-link")
        assert modal.modes == []


class TestIntentEvents:

    @pytest.mark.asyncio
    async def test_lifecycle_published_on_bus(self, registry, notifier):
        bus = EventBus()
        seen = []

        async def record(payload):
            seen.append(payload)

        for topic in (events.TOPIC_INTENT_SET, events.TOPIC_INTENT_REPLAYED, events.TOPIC_INTENT_CLEARED):
            await bus.subscribe(topic, record)

        store = IntentStore(registry, notifier=notifier, bus=bus)
        registry.register_replay_handlers(cast_vote=lambda payload: None)
        store.set_intent(cast_vote_intent("P1", 1))
        store.replay_intent()
        await bus.wait_until_idle()

        assert {"action": "cast_vote", "data": {"pollId": "P1", "optionIndex": 1}} in seen
        assert {"action": None} in seen
        assert {"action": "cast_vote", "handler_count": 1, "failed": 0} in seen

    def test_emit_without_loop_is_dropped(self, registry):
        store = IntentStore(registry, bus=EventBus())
        store.set_intent(cast_vote_intent("P1", 1))
        store.clear_intent()
        assert store.intent is None
