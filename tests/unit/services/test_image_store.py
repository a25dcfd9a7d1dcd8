"""
Unit tests for the per-user image store.
"""

import json

import pytest

from imgshelf.models.image import ImageRecord, build_data_url
from imgshelf.services.images import ImageStore


@pytest.fixture
def store(kv_store):
    return ImageStore(kv_store)


def make_records(count: int) -> list[ImageRecord]:
    return [
        ImageRecord.create_new(name=f"img{i}.png", payload=build_data_url("image/png", f"data{i}".encode()))
        for i in range(count)
    ]


class TestImageStore:
    """Test cases for ImageStore class."""

    def test_load_for_missing_is_empty(self, store):
        """Test a user with no stored collection."""
        assert store.load_for("nobody") == []

    def test_round_trip_preserves_order(self, store):
        """Test save_for then load_for returns the same records in order."""
        records = make_records(5)
        store.save_for("alice", records)

        assert store.load_for("alice") == records

    def test_save_for_does_not_mutate(self, store):
        """Test the caller's list is left untouched."""
        records = make_records(3)
        snapshot = list(records)

        store.save_for("alice", records)

        assert records == snapshot

    def test_partitions_are_per_user(self, store):
        """Test collections of different users never collide."""
        alice, bob = make_records(2), make_records(1)
        store.save_for("alice", alice)
        store.save_for("bob", bob)
        store.save_for("alice_", [])

        assert store.load_for("alice") == alice
        assert store.load_for("bob") == bob
        assert store.partition_key("alice") != store.partition_key("Alice")

    def test_save_empty_collection(self, store):
        """Test that an empty collection is persisted as empty."""
        store.save_for("alice", make_records(2))
        store.save_for("alice", [])

        assert store.load_for("alice") == []

    @pytest.mark.parametrize(
        "raw",
        [
            "garbage",
            json.dumps({"id": "x"}),
            json.dumps([{"id": "x", "name": "a.png"}]),
            json.dumps([{"id": "x", "name": "a.png", "payload": "data:image/png;base64,AA", "uploadedAt": 10**20}]),
        ],
    )
    def test_load_malformed_is_empty(self, store, kv_store, raw):
        """Test that corrupt collections are treated as absent."""
        kv_store.set(store.partition_key("alice"), raw)

        assert store.load_for("alice") == []
