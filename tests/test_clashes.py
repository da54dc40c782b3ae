"""Tests for pairwise clash detection."""

from datetime import timedelta

import pytest

from tpac_schedule_mcp.clashes import (
    ClashingPairSet,
    classify_clash,
    detect_clashes,
    same_booking,
    sorted_pair,
)
from tpac_schedule_mcp.types import ClashStatus

NO_BUFFER = timedelta(0)


class TestClassifyClash:
    def test_back_to_back_without_buffer(self, make_meeting):
        a = make_meeting(1, "09:00", "10:00")
        b = make_meeting(2, "10:00", "11:00")

        assert classify_clash(a, b, NO_BUFFER) is ClashStatus.NONE
        assert classify_clash(b, a, NO_BUFFER) is ClashStatus.NONE

    def test_back_to_back_with_buffer_is_near(self, make_meeting):
        a = make_meeting(1, "09:00", "10:00")
        b = make_meeting(2, "10:00", "11:00")

        assert classify_clash(a, b) is ClashStatus.NEAR

    def test_overlap(self, make_meeting):
        a = make_meeting(1, "09:00", "10:00")
        b = make_meeting(2, "09:55", "10:55")

        assert classify_clash(a, b) is ClashStatus.DEFO
        assert classify_clash(b, a) is ClashStatus.DEFO

    def test_within_buffer(self, make_meeting):
        a = make_meeting(1, "09:00", "10:00")
        b = make_meeting(2, "10:05", "11:05")

        assert classify_clash(a, b, timedelta(minutes=10)) is ClashStatus.NEAR
        assert classify_clash(a, b, NO_BUFFER) is ClashStatus.NONE

    def test_outside_buffer(self, make_meeting):
        a = make_meeting(1, "09:00", "10:00")
        b = make_meeting(2, "10:30", "11:00")

        assert classify_clash(a, b) is ClashStatus.NONE

    def test_same_start(self, make_meeting):
        a = make_meeting(1, "10:00", "10:30")
        b = make_meeting(2, "10:00", "12:00")

        assert classify_clash(a, b, NO_BUFFER) is ClashStatus.DEFO

    def test_nested(self, make_meeting):
        outer = make_meeting(1, "09:00", "12:00")
        inner = make_meeting(2, "10:00", "11:00")

        assert classify_clash(outer, inner, NO_BUFFER) is ClashStatus.DEFO
        assert classify_clash(inner, outer, NO_BUFFER) is ClashStatus.DEFO

    def test_same_booking_in_two_repos(self, make_meeting):
        url = "https://www.w3.org/events/meetings/css/"
        a = make_meeting(1, calendar_url=url, repo="w3c/team-a")
        b = make_meeting(2, calendar_url=url, repo="w3c/team-b")

        assert same_booking(a, b)
        assert classify_clash(a, b) is ClashStatus.NONE

    def test_same_url_different_window_still_clashes(self, make_meeting):
        url = "https://www.w3.org/events/meetings/css/"
        a = make_meeting(1, "10:00", "12:00", calendar_url=url)
        b = make_meeting(2, "11:00", "12:00", calendar_url=url)

        assert classify_clash(a, b) is ClashStatus.DEFO


class TestSortedPair:
    def test_orders_by_start_then_tag(self, make_meeting):
        late = make_meeting(1, "11:00", "12:00")
        early = make_meeting(2, "09:00", "10:00")
        tie = make_meeting(3, "09:00", "10:00")

        assert sorted_pair([late, early]) == (early, late)
        assert sorted_pair([tie, early]) == (early, tie)

    @pytest.mark.parametrize("count", [0, 1, 3])
    def test_requires_two(self, make_meeting, count):
        with pytest.raises(ValueError):
            sorted_pair([make_meeting(i + 1) for i in range(count)])


class TestClashingPairSet:
    def test_symmetric(self, make_meeting):
        a, b = make_meeting(1), make_meeting(2)
        pairs = ClashingPairSet()
        pairs.add(a, b)
        pairs.add(b, a)

        assert len(pairs) == 1
        assert (b, a) in pairs
        assert ClashingPairSet.key(b, a) == (1, 2)

    def test_tag_keys_do_not_collide(self, make_meeting):
        pairs = ClashingPairSet()
        pairs.add(make_meeting(1), make_meeting(12))
        pairs.add(make_meeting(11), make_meeting(2))

        assert len(pairs) == 2


class TestDetectClashes:
    def test_three_mutual_clashes_give_three_pairs(self, make_meeting):
        meetings = [
            make_meeting(1, "10:00", "11:00"),
            make_meeting(2, "10:15", "11:15"),
            make_meeting(3, "10:30", "11:30"),
        ]
        definite, near = detect_clashes(meetings)

        assert len(definite) == 3
        assert len(near) == 0
        assert [m.tag for m in definite.meetings()] == [1, 2, 3]

    def test_definite_and_near_kept_apart(self, make_meeting):
        meetings = [
            make_meeting(1, "09:00", "10:00"),
            make_meeting(2, "09:30", "10:00"),
            make_meeting(3, "10:05", "11:00"),
        ]
        definite, near = detect_clashes(meetings)

        assert {ClashingPairSet.key(*p) for p in definite} == {(1, 2)}
        assert {ClashingPairSet.key(*p) for p in near} == {(1, 3), (2, 3)}

    def test_accumulates_into_given_sets(self, make_meeting):
        definite, near = ClashingPairSet(), ClashingPairSet()
        detect_clashes([make_meeting(1), make_meeting(2)], definite=definite, near=near)
        detect_clashes(
            [make_meeting(3, day="tuesday"), make_meeting(4, day="tuesday")],
            definite=definite,
            near=near,
        )

        assert len(definite) == 2

    def test_duplicate_booking_not_reported(self, make_meeting):
        url = "https://www.w3.org/events/meetings/css/"
        meetings = [
            make_meeting(1, calendar_url=url, repo="w3c/team-a"),
            make_meeting(2, calendar_url=url, repo="w3c/team-b"),
        ]
        definite, near = detect_clashes(meetings)

        assert len(definite) == 0
        assert len(near) == 0

    def test_no_meetings(self):
        definite, near = detect_clashes([])

        assert len(definite) == 0
        assert len(near) == 0
