"""
# Registry State Store

The ledger the registry persists its four collections in. The registry only needs
get/set/remove/iterate/contains semantics, expressed by two small interfaces:

- **`AccountSet`**: a set of account IDs iterated in insertion order
  (moderators, authors, denylist).
- **`BlogPostMap`**: blog post documents keyed by post ID, iterated in insertion order.

`RegistryState` bundles one instance of each collection. It is constructed explicitly
at startup and handed to the registry manager; nothing here is a module-level global.

## Backends

### In-memory
Plain dicts; insertion order is the dict order. Used by default and by the tests.

```python
state = RegistryState.in_memory(denylist=["spammer"])
```

### MongoDB
One collection per registry collection, documents shaped as
`{"_id": key, "seq": n, "value": ...}`. `seq` comes from the `registry_counters`
collection and gives the insertion order; overwriting a post keeps its `seq`.

```python
await db_manager.connect()
state = RegistryState.from_database(db_manager)
```
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ASCENDING, ReturnDocument

from blog_registry.managers.logging_manager import get_logger

logger = get_logger(prefix="[STATE]")

MODERATORS_COLLECTION = "moderators"
AUTHORS_COLLECTION = "authors"
DENYLIST_COLLECTION = "denylist"
BLOG_POSTS_COLLECTION = "blog_posts"
COUNTERS_COLLECTION = "registry_counters"
REGISTRY_COLLECTIONS = [MODERATORS_COLLECTION, AUTHORS_COLLECTION, DENYLIST_COLLECTION, BLOG_POSTS_COLLECTION]


class AccountSet(ABC):
    """A set of account IDs with insertion-ordered iteration."""

    @abstractmethod
    async def contains(self, account_id: str) -> bool:
        pass

    @abstractmethod
    async def add(self, account_id: str) -> bool:
        """Add the account. Returns True if it was not present before."""
        pass

    @abstractmethod
    async def remove(self, account_id: str) -> bool:
        """Remove the account. Returns True if it was present."""
        pass

    @abstractmethod
    async def to_list(self) -> List[str]:
        pass

    async def extend(self, account_ids: Iterable[str]) -> int:
        added = 0
        for account_id in account_ids:
            if await self.add(account_id):
                added += 1
        return added

    async def size(self) -> int:
        return len(await self.to_list())


class BlogPostMap(ABC):
    """Blog post documents keyed by post ID, with insertion-ordered iteration."""

    @abstractmethod
    async def contains(self, blog_id: str) -> bool:
        pass

    @abstractmethod
    async def get(self, blog_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def set(self, blog_id: str, document: Dict[str, Any]) -> None:
        """Insert or overwrite. Overwriting keeps the post's position."""
        pass

    @abstractmethod
    async def remove(self, blog_id: str) -> Optional[Dict[str, Any]]:
        """Delete the post and return its last document, or None if absent."""
        pass

    @abstractmethod
    async def values(self) -> List[Dict[str, Any]]:
        pass


# In-memory backend

class InMemoryAccountSet(AccountSet):
    def __init__(self, initial: Optional[Iterable[str]] = None):
        self._members: Dict[str, None] = {}
        for account_id in initial or []:
            self._members[account_id] = None

    async def contains(self, account_id: str) -> bool:
        return account_id in self._members

    async def add(self, account_id: str) -> bool:
        if account_id in self._members:
            return False
        self._members[account_id] = None
        return True

    async def remove(self, account_id: str) -> bool:
        if account_id not in self._members:
            return False
        del self._members[account_id]
        return True

    async def to_list(self) -> List[str]:
        return list(self._members)

    async def size(self) -> int:
        return len(self._members)


class InMemoryBlogPostMap(BlogPostMap):
    def __init__(self):
        self._posts: Dict[str, Dict[str, Any]] = {}

    async def contains(self, blog_id: str) -> bool:
        return blog_id in self._posts

    async def get(self, blog_id: str) -> Optional[Dict[str, Any]]:
        document = self._posts.get(blog_id)
        return dict(document) if document is not None else None

    async def set(self, blog_id: str, document: Dict[str, Any]) -> None:
        self._posts[blog_id] = dict(document)

    async def remove(self, blog_id: str) -> Optional[Dict[str, Any]]:
        return self._posts.pop(blog_id, None)

    async def values(self) -> List[Dict[str, Any]]:
        return [dict(document) for document in self._posts.values()]


# MongoDB backend

class _SequenceAllocator:
    """Hands out increasing sequence numbers per registry collection."""

    def __init__(self, counters):
        self._counters = counters

    async def next(self, name: str) -> int:
        counter = await self._counters.find_one_and_update(
            {"_id": name},
            {"$inc": {"value": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(counter["value"])


class MongoAccountSet(AccountSet):
    def __init__(self, collection, sequences: _SequenceAllocator, name: str):
        self._collection = collection
        self._sequences = sequences
        self._name = name

    async def contains(self, account_id: str) -> bool:
        return await self._collection.find_one({"_id": account_id}, {"_id": 1}) is not None

    async def add(self, account_id: str) -> bool:
        if await self.contains(account_id):
            return False
        seq = await self._sequences.next(self._name)
        result = await self._collection.update_one(
            {"_id": account_id}, {"$setOnInsert": {"seq": seq}}, upsert=True
        )
        return result.upserted_id is not None

    async def remove(self, account_id: str) -> bool:
        result = await self._collection.delete_one({"_id": account_id})
        return result.deleted_count > 0

    async def to_list(self) -> List[str]:
        cursor = self._collection.find({}, {"_id": 1}).sort("seq", ASCENDING)
        docs = await cursor.to_list(length=None)
        return [doc["_id"] for doc in docs]

    async def size(self) -> int:
        return await self._collection.count_documents({})


class MongoBlogPostMap(BlogPostMap):
    def __init__(self, collection, sequences: _SequenceAllocator, name: str = BLOG_POSTS_COLLECTION):
        self._collection = collection
        self._sequences = sequences
        self._name = name

    async def contains(self, blog_id: str) -> bool:
        return await self._collection.find_one({"_id": blog_id}, {"_id": 1}) is not None

    async def get(self, blog_id: str) -> Optional[Dict[str, Any]]:
        doc = await self._collection.find_one({"_id": blog_id})
        return doc["value"] if doc else None

    async def set(self, blog_id: str, document: Dict[str, Any]) -> None:
        if await self.contains(blog_id):
            await self._collection.update_one({"_id": blog_id}, {"$set": {"value": document}})
            return
        seq = await self._sequences.next(self._name)
        await self._collection.update_one(
            {"_id": blog_id},
            {"$set": {"value": document}, "$setOnInsert": {"seq": seq}},
            upsert=True,
        )

    async def remove(self, blog_id: str) -> Optional[Dict[str, Any]]:
        doc = await self._collection.find_one_and_delete({"_id": blog_id})
        return doc["value"] if doc else None

    async def values(self) -> List[Dict[str, Any]]:
        cursor = self._collection.find({}).sort("seq", ASCENDING)
        docs = await cursor.to_list(length=None)
        return [doc["value"] for doc in docs]


class RegistryState:
    """The four registry collections, created once at initialization."""

    def __init__(
        self,
        moderators: AccountSet,
        authors: AccountSet,
        denylist: AccountSet,
        blog_posts: BlogPostMap,
        backend: str = "memory",
    ):
        self.moderators = moderators
        self.authors = authors
        self.denylist = denylist
        self.blog_posts = blog_posts
        self.backend = backend

    @classmethod
    def in_memory(
        cls,
        moderators: Optional[Iterable[str]] = None,
        authors: Optional[Iterable[str]] = None,
        denylist: Optional[Iterable[str]] = None,
    ) -> "RegistryState":
        return cls(
            moderators=InMemoryAccountSet(moderators),
            authors=InMemoryAccountSet(authors),
            denylist=InMemoryAccountSet(denylist),
            blog_posts=InMemoryBlogPostMap(),
            backend="memory",
        )

    @classmethod
    def from_database(cls, db_manager) -> "RegistryState":
        """Build MongoDB-backed collections from a connected `DatabaseManager`."""
        sequences = _SequenceAllocator(db_manager.get_collection(COUNTERS_COLLECTION))
        logger.info("Using MongoDB registry state in database %s", db_manager.database_name)
        return cls(
            moderators=MongoAccountSet(
                db_manager.get_collection(MODERATORS_COLLECTION), sequences, MODERATORS_COLLECTION
            ),
            authors=MongoAccountSet(db_manager.get_collection(AUTHORS_COLLECTION), sequences, AUTHORS_COLLECTION),
            denylist=MongoAccountSet(
                db_manager.get_collection(DENYLIST_COLLECTION), sequences, DENYLIST_COLLECTION
            ),
            blog_posts=MongoBlogPostMap(db_manager.get_collection(BLOG_POSTS_COLLECTION), sequences),
            backend="mongodb",
        )
