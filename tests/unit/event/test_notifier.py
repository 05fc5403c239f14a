"""Unit tests for EventNotifier."""

import logging
from unittest.mock import Mock

import pytest

from cachebus.event.notifier import EventNotifier


class TestSubscribe:
    """Test registration and delivery."""

    def test_publish_reaches_every_handler(self, notifier):
        first, second = Mock(), Mock()
        notifier.subscribe("cache:set", first)
        notifier.subscribe("cache:set", second)

        assert notifier.publish("cache:set", {"key": "k"}) == 2

        first.assert_called_once_with({"key": "k"})
        second.assert_called_once_with({"key": "k"})

    def test_publish_only_to_matching_event(self, notifier):
        handler = Mock()
        notifier.subscribe("cache:hit", handler)
        assert notifier.publish("cache:miss", {}) == 0
        handler.assert_not_called()

    def test_publish_without_handlers(self, notifier):
        assert notifier.publish("nothing") == 0

    def test_duplicate_registration_is_single(self, notifier):
        handler = Mock()
        notifier.subscribe("e", handler)
        notifier.subscribe("e", handler)
        notifier.publish("e", 1)
        handler.assert_called_once_with(1)

    def test_unsubscribe_token_removes_exactly_that_handler(self, notifier):
        keep, drop = Mock(), Mock()
        notifier.subscribe("e", keep)
        unsubscribe = notifier.subscribe("e", drop)

        unsubscribe()
        notifier.publish("e", "payload")

        keep.assert_called_once_with("payload")
        drop.assert_not_called()

    def test_unsubscribe_is_idempotent(self, notifier):
        handler = Mock()
        notifier.unsubscribe("never", handler)
        unsubscribe = notifier.subscribe("e", handler)
        unsubscribe()
        unsubscribe()
        notifier.unsubscribe("e", handler)
        assert notifier.listener_count("e") == 0

    def test_rejects_non_callable(self, notifier):
        with pytest.raises(TypeError):
            notifier.subscribe("e", "not callable")

    def test_handler_added_during_publish_waits_for_next(self, notifier):
        late = Mock()
        notifier.subscribe("e", lambda payload: notifier.subscribe("e", late))
        notifier.publish("e", 1)
        late.assert_not_called()
        notifier.publish("e", 2)
        late.assert_called_once_with(2)


class TestSubscribeOnce:
    """Test one-shot handlers."""

    def test_called_once(self, notifier):
        handler = Mock()
        notifier.subscribe_once("e", handler)
        notifier.publish("e", 1)
        notifier.publish("e", 2)
        handler.assert_called_once_with(1)
        assert notifier.listener_count("e") == 0

    def test_removed_even_if_it_raises(self, notifier):
        handler = Mock(side_effect=RuntimeError("boom"))
        notifier.subscribe_once("e", handler)
        notifier.publish("e", 1)
        notifier.publish("e", 2)
        assert handler.call_count == 1

    def test_unsubscribe_before_first_call(self, notifier):
        handler = Mock()
        notifier.subscribe_once("e", handler)
        notifier.unsubscribe("e", handler)
        notifier.publish("e", 1)
        handler.assert_not_called()

    def test_token_cancels(self, notifier):
        handler = Mock()
        unsubscribe = notifier.subscribe_once("e", handler)
        unsubscribe()
        notifier.publish("e", 1)
        handler.assert_not_called()

    def test_repeated_registration_is_single(self, notifier):
        handler = Mock()
        notifier.subscribe_once("e", handler)
        notifier.subscribe_once("e", handler)
        assert notifier.listener_count("e") == 1

        notifier.unsubscribe("e", handler)
        notifier.publish("e", 1)

        handler.assert_not_called()
        assert notifier.listener_count("e") == 0

    def test_once_token_leaves_plain_subscription(self, notifier):
        handler = Mock()
        notifier.subscribe("e", handler)
        cancel_once = notifier.subscribe_once("e", handler)

        cancel_once()
        notifier.publish("e", 1)

        handler.assert_called_once_with(1)

    def test_plain_token_leaves_once_subscription(self, notifier):
        handler = Mock()
        cancel_plain = notifier.subscribe("e", handler)
        notifier.subscribe_once("e", handler)

        cancel_plain()
        notifier.publish("e", 1)
        notifier.publish("e", 2)

        handler.assert_called_once_with(1)

    def test_stale_once_token_is_noop(self, notifier):
        handler = Mock()
        cancel_first = notifier.subscribe_once("e", handler)
        notifier.publish("e", 1)
        notifier.subscribe_once("e", handler)

        cancel_first()
        notifier.publish("e", 2)

        assert [c.args[0] for c in handler.call_args_list] == [1, 2]


class TestIsolation:
    """A failing handler never stops the others or reaches the publisher."""

    def test_failing_handler_is_logged_and_others_run(self, notifier, caplog):
        after = Mock()

        def boom(payload):
            raise ValueError("bad handler")

        notifier.subscribe("e", boom)
        notifier.subscribe("e", after)

        with caplog.at_level(logging.ERROR, logger="cachebus.event.notifier"):
            notifier.publish("e", {"key": "k"})

        after.assert_called_once_with({"key": "k"})
        assert "failed for event e" in caplog.text


class TestWildcard:
    """Test '*' subscriptions."""

    def test_wildcard_receives_every_event_tagged(self, notifier):
        handler = Mock()
        notifier.subscribe("*", handler)

        notifier.publish("cache:set", {"key": "k"})
        notifier.publish("cache:statsReset")
        notifier.publish("custom", 42)

        assert [c.args[0] for c in handler.call_args_list] == [
            {"key": "k", "event": "cache:set"},
            {"event": "cache:statsReset"},
            {"event": "custom", "data": 42},
        ]

    def test_tagging_does_not_mutate_direct_payload(self, notifier):
        direct = Mock()
        notifier.subscribe("e", direct)
        notifier.subscribe("*", Mock())
        payload = {"key": "k"}
        notifier.publish("e", payload)
        assert payload == {"key": "k"}

    def test_publish_counts_wildcard_handlers(self, notifier):
        notifier.subscribe("e", Mock())
        notifier.subscribe("*", Mock())
        assert notifier.publish("e", {}) == 2


class TestClear:
    """Test bulk removal."""

    def test_clear_one_event(self, notifier):
        kept = Mock()
        notifier.subscribe("a", Mock())
        notifier.subscribe_once("a", Mock())
        notifier.subscribe("b", kept)

        notifier.clear("a")

        assert notifier.listener_count("a") == 0
        assert notifier.events() == ["b"]
        notifier.publish("b", None)
        kept.assert_called_once()

    def test_clear_all(self, notifier):
        notifier.subscribe("a", Mock())
        notifier.subscribe("b", Mock())
        notifier.clear()
        assert notifier.listener_count() == 0
        assert notifier.events() == []

    def test_clear_unknown_event_is_noop(self):
        EventNotifier().clear("nothing")
