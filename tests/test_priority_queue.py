"""Tests for fingers.priority_queue."""

from __future__ import annotations

from fingers.priority_queue import PriorityQueue


class TestPriorityQueue:
    def test_pops_highest_priority_first(self) -> None:
        pq: PriorityQueue[str] = PriorityQueue()
        for priority, item in [
            (3, "Clear drains"),
            (6, "drink tea"),
            (5, "Make tea"),
            (4, "Feed cat"),
            (7, "eat biscuit"),
            (2, "Tax return"),
            (1, "Solve RC tasks"),
        ]:
            pq.push(priority, item)

        results = []
        while (item := pq.pop()) is not None:
            results.append(item)

        assert results == [
            "eat biscuit",
            "drink tea",
            "Make tea",
            "Feed cat",
            "Clear drains",
            "Tax return",
            "Solve RC tasks",
        ]

    def test_ties_pop_in_insertion_order(self) -> None:
        pq: PriorityQueue[str] = PriorityQueue()
        pq.push(1, "first")
        pq.push(2, "high")
        pq.push(1, "second")
        pq.push(1, "third")

        assert [pq.pop(), pq.pop(), pq.pop(), pq.pop()] == ["high", "first", "second", "third"]

    def test_negative_priorities(self) -> None:
        pq: PriorityQueue[int] = PriorityQueue()
        for i in range(5):
            pq.push(-i, i)
        assert [pq.pop() for _ in range(5)] == [0, 1, 2, 3, 4]

    def test_pop_empty_returns_none(self) -> None:
        pq: PriorityQueue[str] = PriorityQueue()
        assert pq.pop() is None

    def test_size_tracks_push_and_pop(self) -> None:
        pq: PriorityQueue[str] = PriorityQueue()
        assert pq.size() == 0
        pq.push(1, "a")
        pq.push(1, "b")
        pq.push(5, "c")
        assert pq.size() == 3
        assert len(pq) == 3
        pq.pop()
        assert pq.size() == 2

    def test_bucket_reused_after_emptied(self) -> None:
        pq: PriorityQueue[str] = PriorityQueue()
        pq.push(1, "a")
        assert pq.pop() == "a"
        pq.push(1, "b")
        pq.push(0, "c")
        assert pq.pop() == "b"
        assert pq.pop() == "c"
        assert pq.pop() is None
