"""
Tests for the registry state store backends.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from blog_registry.database.state_store import (
    COUNTERS_COLLECTION,
    InMemoryAccountSet,
    InMemoryBlogPostMap,
    MongoAccountSet,
    MongoBlogPostMap,
    RegistryState,
    _SequenceAllocator,
)


@pytest.mark.asyncio
async def test_in_memory_account_set_keeps_insertion_order():
    """Test the in-memory account set ordering and membership."""
    accounts = InMemoryAccountSet(["b"])

    assert await accounts.add("a") is True
    assert await accounts.add("b") is False
    assert await accounts.extend(["c", "a"]) == 1
    assert await accounts.to_list() == ["b", "a", "c"]
    assert await accounts.size() == 3

    assert await accounts.remove("a") is True
    assert await accounts.remove("a") is False
    assert await accounts.to_list() == ["b", "c"]


@pytest.mark.asyncio
async def test_in_memory_post_map_returns_copies():
    """Test that the in-memory post map hands out copies."""
    posts = InMemoryBlogPostMap()
    await posts.set("p1", {"title": "one"})

    document = await posts.get("p1")
    document["title"] = "changed"

    assert (await posts.get("p1"))["title"] == "one"
    assert await posts.remove("p1") == {"title": "one"}
    assert await posts.remove("p1") is None
    assert await posts.get("p1") is None


def _collection():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.find_one_and_delete = AsyncMock(return_value=None)
    collection.count_documents = AsyncMock(return_value=0)
    return collection


@pytest.fixture
def sequences():
    counters = MagicMock()
    counters.find_one_and_update = AsyncMock(return_value={"_id": "authors", "value": 7})
    return _SequenceAllocator(counters)


@pytest.mark.asyncio
async def test_mongo_account_set_add_allocates_sequence(sequences):
    """Test that adding an account allocates an insertion sequence."""
    collection = _collection()
    collection.update_one.return_value = MagicMock(upserted_id="alice")
    accounts = MongoAccountSet(collection, sequences, "authors")

    assert await accounts.add("alice") is True

    collection.update_one.assert_called_once_with({"_id": "alice"}, {"$setOnInsert": {"seq": 7}}, upsert=True)


@pytest.mark.asyncio
async def test_mongo_account_set_add_existing_is_noop(sequences):
    """Test that adding an existing account writes nothing."""
    collection = _collection()
    collection.find_one.return_value = {"_id": "alice"}
    accounts = MongoAccountSet(collection, sequences, "authors")

    assert await accounts.add("alice") is False
    collection.update_one.assert_not_called()


@pytest.mark.asyncio
async def test_mongo_account_set_lists_by_sequence(sequences):
    """Test that accounts are listed by insertion sequence."""
    collection = _collection()
    cursor = collection.find.return_value.sort.return_value
    cursor.to_list = AsyncMock(return_value=[{"_id": "a"}, {"_id": "b"}])
    accounts = MongoAccountSet(collection, sequences, "authors")

    assert await accounts.to_list() == ["a", "b"]
    collection.find.return_value.sort.assert_called_once_with("seq", 1)


@pytest.mark.asyncio
async def test_mongo_post_map_overwrite_keeps_sequence(sequences):
    """Test that overwriting a post keeps its sequence."""
    collection = _collection()
    collection.find_one.return_value = {"_id": "p1"}
    posts = MongoBlogPostMap(collection, sequences)

    await posts.set("p1", {"title": "new"})

    collection.update_one.assert_called_once_with({"_id": "p1"}, {"$set": {"value": {"title": "new"}}})
    sequences._counters.find_one_and_update.assert_not_called()


@pytest.mark.asyncio
async def test_mongo_post_map_insert_and_remove(sequences):
    """Test inserting and removing a post document."""
    collection = _collection()
    posts = MongoBlogPostMap(collection, sequences)

    await posts.set("p2", {"title": "two"})
    collection.update_one.assert_called_once_with(
        {"_id": "p2"},
        {"$set": {"value": {"title": "two"}}, "$setOnInsert": {"seq": 7}},
        upsert=True,
    )

    collection.find_one_and_delete.return_value = {"_id": "p2", "seq": 7, "value": {"title": "two"}}
    assert await posts.remove("p2") == {"title": "two"}


def test_registry_state_from_database():
    """Test building the registry state from the database manager."""
    db_manager = MagicMock()
    db_manager.database_name = "blog_registry"

    state = RegistryState.from_database(db_manager)

    assert state.backend == "mongodb"
    requested = [call.args[0] for call in db_manager.get_collection.call_args_list]
    assert COUNTERS_COLLECTION in requested
    assert {"moderators", "authors", "denylist", "blog_posts"} <= set(requested)
