"""Tests for the notification dispatcher."""

from __future__ import annotations

import threading
import unittest
from unittest.mock import MagicMock

from firebase_admin import messaging

from tilawah.notifications import (
    MulticastRequest,
    NotificationDispatcher,
    TopicRequest,
    group_topic,
)
from tests.conftest import make_messaging


class TestNotificationDispatcher(unittest.TestCase):
    def setUp(self) -> None:
        self.client = make_messaging()
        self.dispatcher = NotificationDispatcher(self.client)

    def test_group_topic_name(self) -> None:
        self.assertEqual(group_topic("abc"), "group_abc")

    def test_failed_send_does_not_abort_batch(self) -> None:
        self.client.send.side_effect = RuntimeError("topic unavailable")

        results = self.dispatcher.dispatch(
            [
                TopicRequest(topic="group_g1", title="T", body="B"),
                MulticastRequest(tokens=["tok1"], title="M", body="B"),
            ]
        )

        self.assertEqual(len(results), 2)
        failed = [r for r in results if not r.ok]
        succeeded = [r for r in results if r.ok]
        self.assertEqual(len(failed), 1)
        self.assertEqual(failed[0].reason, "topic unavailable")
        self.assertIsInstance(succeeded[0].request, MulticastRequest)
        self.client.send_each_for_multicast.assert_called_once()

    def test_sends_run_concurrently_and_all_settle(self) -> None:
        multicast_sent = threading.Event()
        settled = []

        def slow_topic_send(message):
            # Only returns True if the multicast was sent while this one waited
            settled.append(("topic", multicast_sent.wait(timeout=5)))
            return "projects/test/messages/slow"

        def multicast_send(message):
            multicast_sent.set()
            settled.append(("multicast", True))
            return MagicMock(success_count=1, failure_count=0)

        self.client.send.side_effect = slow_topic_send
        self.client.send_each_for_multicast.side_effect = multicast_send

        results = self.dispatcher.dispatch(
            [
                TopicRequest(topic="group_g1", title="T", body="B"),
                MulticastRequest(tokens=["tok1"], title="M", body="B"),
            ]
        )

        self.assertTrue(all(r.ok for r in results))
        self.assertEqual(sorted(settled), [("multicast", True), ("topic", True)])
        self.assertEqual(results[0].message_id, "projects/test/messages/slow")

    def test_empty_multicast_is_skipped(self) -> None:
        results = self.dispatcher.dispatch(
            [MulticastRequest(tokens=[], title="T", body="B")]
        )
        self.assertEqual(results, [])
        self.client.send_each_for_multicast.assert_not_called()

    def test_empty_batch(self) -> None:
        self.assertEqual(self.dispatcher.dispatch([]), [])

    def test_builds_fcm_messages_with_string_data(self) -> None:
        self.dispatcher.dispatch(
            [
                TopicRequest(
                    topic="group_g1",
                    title="Title",
                    body="Body",
                    data={"juzNumber": 5, "memberName": None},
                )
            ]
        )

        message = self.client.send.call_args.args[0]
        self.assertIsInstance(message, messaging.Message)
        self.assertEqual(message.topic, "group_g1")
        self.assertEqual(message.notification.title, "Title")
        self.assertEqual(message.notification.body, "Body")
        self.assertEqual(message.data, {"juzNumber": "5", "memberName": ""})

    def test_multicast_reports_token_failures(self) -> None:
        self.client.send_each_for_multicast.return_value = MagicMock(
            success_count=1, failure_count=2
        )

        results = self.dispatcher.dispatch(
            [MulticastRequest(tokens=["a", "b", "c"], title="T", body="B")]
        )

        self.assertTrue(results[0].ok)
        self.assertEqual(results[0].success_count, 1)
        self.assertEqual(results[0].failure_count, 2)
        message = self.client.send_each_for_multicast.call_args.args[0]
        self.assertIsInstance(message, messaging.MulticastMessage)
        self.assertEqual(message.tokens, ["a", "b", "c"])

    def test_topic_result_carries_message_id(self) -> None:
        results = self.dispatcher.dispatch(
            [TopicRequest(topic="group_g1", title="T", body="B")]
        )
        self.assertEqual(results[0].message_id, "projects/test/messages/1")


if __name__ == "__main__":
    unittest.main()
