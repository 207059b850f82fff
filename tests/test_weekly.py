"""Tests for the weekly reminder job and week identifiers."""

from __future__ import annotations

import datetime
import unittest
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tilawah.triggers import generate_week_id, get_week_start, weekly_auto_reset
from tilawah.triggers.weekly import has_assignments
from tests.conftest import add_user, make_context, multicast_messages

MONDAY = datetime.datetime(2024, 1, 29, 0, 0, tzinfo=datetime.timezone.utc)


class TestWeekId(unittest.TestCase):
    def test_first_monday_of_2024(self) -> None:
        self.assertEqual(generate_week_id(datetime.date(2024, 1, 1)), "2024-W01")

    def test_every_day_of_a_week_shares_the_id(self) -> None:
        for day in range(29, 32):
            self.assertEqual(generate_week_id(datetime.date(2024, 1, day)), "2024-W05")
        self.assertEqual(generate_week_id(datetime.date(2024, 2, 4)), "2024-W05")

    def test_week_before_first_thursday_belongs_to_previous_year(self) -> None:
        # Jan 1 2021 is a Friday; the year's first Thursday is Jan 7.
        self.assertEqual(generate_week_id(datetime.date(2021, 1, 1)), "2020-W53")
        self.assertEqual(generate_week_id(datetime.date(2021, 1, 4)), "2021-W01")

    def test_late_december_can_start_next_year(self) -> None:
        self.assertEqual(generate_week_id(datetime.date(2024, 12, 30)), "2025-W01")

    def test_week_start_is_monday(self) -> None:
        self.assertEqual(
            get_week_start(datetime.date(2024, 2, 4)), datetime.date(2024, 1, 29)
        )
        self.assertEqual(get_week_start(MONDAY), datetime.date(2024, 1, 29))


class TestWeeklyAutoReset(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = make_context()
        self.db = self.ctx.db
        add_user(self.db, "admin1", tokens=["admin-tok"])

    def add_group(self, group_id: str, **overrides) -> None:
        data = {
            "name": f"Group {group_id}",
            "admin_uid": "admin1",
            "member_ids": ["admin1", "member1"],
            "members": [{"uid": "admin1"}, {"uid": "member1"}],
        }
        data.update(overrides)
        self.db.collection("groups").document(group_id).set(data)

    def test_reminds_admin_when_week_is_empty(self) -> None:
        self.add_group("g1")

        summary = weekly_auto_reset(self.ctx, now=MONDAY)

        self.assertEqual(summary.week_id, "2024-W05")
        self.assertEqual(summary.processed, 1)
        self.assertEqual(summary.reminded, ["g1"])
        [multicast] = multicast_messages(self.ctx)
        self.assertEqual(multicast.tokens, ["admin-tok"])
        self.assertEqual(multicast.notification.title, "New week started")
        self.assertEqual(
            multicast.notification.body,
            "It's a new week! Assign weekly Juz for Group g1.",
        )
        self.assertEqual(
            multicast.data,
            {"groupId": "g1", "action": "weekly_reset", "weekId": "2024-W05"},
        )
        self.ctx.messaging.send.assert_not_called()

    def test_skips_groups_with_assignments(self) -> None:
        self.add_group("g1")
        self.db.collection("recitations").document("r1").set(
            {"group_id": "g1", "week_id": "2024-W05", "status": "pending"}
        )

        self.assertTrue(has_assignments(self.db, "g1", "2024-W05"))
        summary = weekly_auto_reset(self.ctx, now=MONDAY)

        self.assertEqual(summary.reminded, [])
        self.ctx.messaging.send_each_for_multicast.assert_not_called()

    def test_previous_week_assignments_do_not_count(self) -> None:
        self.add_group("g1")
        self.db.collection("recitations").document("r1").set(
            {"group_id": "g1", "week_id": "2024-W04", "status": "completed"}
        )

        summary = weekly_auto_reset(self.ctx, now=MONDAY)
        self.assertEqual(summary.reminded, ["g1"])

    def test_skips_groups_without_admin_or_members(self) -> None:
        self.add_group("no-admin", admin_uid=None)
        self.add_group("no-members", member_ids=[], members=[])
        self.add_group("outsider-admin", member_ids=["member1"], members=[])

        with patch("tilawah.triggers.weekly.has_assignments") as lookup:
            summary = weekly_auto_reset(self.ctx, now=MONDAY)

        self.assertEqual(summary.processed, 3)
        self.assertEqual(summary.reminded, [])
        self.ctx.messaging.send_each_for_multicast.assert_not_called()
        lookup.assert_not_called()

    def test_one_failing_group_does_not_block_others(self) -> None:
        self.add_group("bad")
        self.add_group("good")

        def flaky(db, group_id, week_id):
            if group_id == "bad":
                raise RuntimeError("query failed")
            return False

        with patch("tilawah.triggers.weekly.has_assignments", side_effect=flaky):
            summary = weekly_auto_reset(self.ctx, now=MONDAY)

        self.assertEqual(summary.processed, 2)
        self.assertEqual(summary.failed, ["bad"])
        self.assertEqual(summary.reminded, ["good"])

    def test_listing_groups_failure_propagates(self) -> None:
        ctx = make_context(db=MagicMock())
        ctx.db.collection.return_value.stream.side_effect = RuntimeError("down")

        with self.assertRaises(RuntimeError):
            weekly_auto_reset(ctx, now=MONDAY)

    def test_timezone_shifts_the_week(self) -> None:
        # Sunday evening UTC is already Monday in Riyadh.
        sunday = datetime.datetime(2024, 1, 28, 22, 0, tzinfo=datetime.timezone.utc)

        self.assertEqual(weekly_auto_reset(self.ctx, now=sunday).week_id, "2024-W04")
        try:
            ZoneInfo("Asia/Riyadh")
        except ZoneInfoNotFoundError:
            self.skipTest("time zone data unavailable")

        summary = weekly_auto_reset(self.ctx, now=sunday, tz="Asia/Riyadh")
        self.assertEqual(summary.week_id, "2024-W05")


if __name__ == "__main__":
    unittest.main()
