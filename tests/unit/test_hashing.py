"""Tests for input hashing."""

from __future__ import annotations

from designate_operator.utils.hashing import InputHashTracker, object_hash, set_hash


class TestObjectHash:
    """Test cases for object_hash."""

    def test_key_order_does_not_matter(self):
        assert object_hash({"a": 1, "b": 2}) == object_hash({"b": 2, "a": 1})

    def test_different_data_differs(self):
        assert object_hash({"a": 1}) != object_hash({"a": 2})

    def test_is_sha256_hex(self):
        assert len(object_hash({})) == 64


class TestSetHash:
    def test_records_new_value(self):
        hashes = {}
        assert set_hash(hashes, "input", "abc") is True
        assert hashes == {"input": "abc"}

    def test_same_value_is_not_a_change(self):
        hashes = {"input": "abc"}
        assert set_hash(hashes, "input", "abc") is False


class TestInputHashTracker:
    """Test cases for InputHashTracker."""

    def test_first_compute_is_a_change(self):
        hashes = {}
        tracker = InputHashTracker(hashes)

        value, changed = tracker.compute_and_record("input", {"osp-secret": "s1", "cm": "c1"})

        assert changed is True
        assert hashes["input"] == value

    def test_stable_inputs_report_no_change(self):
        tracker = InputHashTracker({})
        first, _ = tracker.compute_and_record("input", {"osp-secret": "s1", "cm": "c1"})

        second, changed = tracker.compute_and_record("input", {"cm": "c1", "osp-secret": "s1"})

        assert second == first
        assert changed is False

    def test_changed_input_updates_record(self):
        hashes = {}
        tracker = InputHashTracker(hashes)
        first, _ = tracker.compute_and_record("input", {"osp-secret": "s1"})

        second, changed = tracker.compute_and_record("input", {"osp-secret": "s2"})

        assert changed is True
        assert second != first
        assert hashes["input"] == second

    def test_keys_are_independent(self):
        hashes = {"dbsync": "job"}
        tracker = InputHashTracker(hashes)

        tracker.compute_and_record("input", {"a": "b"})

        assert hashes["dbsync"] == "job"
        assert tracker.record("dbsync", "job") is False
        assert tracker.record("dbsync", "job2") is True
        assert tracker.get("dbsync") == "job2"
