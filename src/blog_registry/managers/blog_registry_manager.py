"""
# Blog Registry Manager

The registry of the decentralized blogging platform: moderators, authors, a
denylist, and blog posts, with role-based permission rules on every mutation.

## Execution Model

Each operation runs inside one critical section (`asyncio.Lock`), so an operation
fully completes (guards, reads, mutations, persistence) before the next begins.
Guards run before any mutation, so a rejected call leaves the state untouched.

## Operations

| Operation | Guards |
|---|---|
| `add_moderators` | deposit, caller not denylisted, registry account or moderator, targets not denylisted |
| `remove_moderators` | deposit, registry account or moderator |
| `register` | deposit, caller not denylisted |
| `create_blog_post` | caller is an author |
| `update_blog_post` | caller is an author, post exists, new author not denylisted, caller owns the post |
| `remove_blog_post` | caller is an author, post exists, caller owns the post |
| `get_authors`, `get_blog_post`, `get_blog_posts`, `get_moderators` | none |

The denylist has no operation on the public surface; `denylist_add`,
`denylist_remove` and `get_denylist` exist for external administration (CLI).
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from blog_registry.config import settings
from blog_registry.database.state_store import RegistryState
from blog_registry.managers.blog_security import (
    Conflict,
    InvalidArgument,
    NotFound,
    PermissionDenied,
    assert_is_author,
    assert_not_in_denylist,
    assert_one_deposit,
    assert_owner_or_moderator,
)
from blog_registry.managers.logging_manager import get_logger
from blog_registry.models.blog_models import BlogPost, CallContext, blog_post_or_none

logger = get_logger(prefix="[Blog Registry]")


def paginate(items: Sequence[Any], limit: int, from_index: int) -> List[Any]:
    """Half-open slice `items[from_index:from_index + limit]`."""
    if not isinstance(limit, int) or not isinstance(from_index, int) or limit < 0 or from_index < 0:
        raise InvalidArgument("limit and from must be non-negative integers")
    return list(items[from_index : from_index + limit])


class BlogRegistryManager:
    """
    Blog registry operations over an explicitly constructed `RegistryState`.

    Args:
        state (RegistryState): The four registry collections.
        required_deposit (int): Exact deposit required by payable operations.
        default_page_limit (int): Default `limit` of the paginated views.
    """

    def __init__(
        self,
        state: RegistryState,
        required_deposit: Optional[int] = None,
        default_page_limit: Optional[int] = None,
    ):
        self.state = state
        self.required_deposit = required_deposit if required_deposit is not None else settings.REQUIRED_DEPOSIT
        self.default_page_limit = default_page_limit if default_page_limit is not None else settings.DEFAULT_PAGE_LIMIT
        self._lock = asyncio.Lock()

    @classmethod
    async def init(cls, state: RegistryState, denylist: Optional[Sequence[str]] = None, **kwargs) -> "BlogRegistryManager":
        """Create the registry once at deployment, seeding the denylist."""
        manager = cls(state, **kwargs)
        if denylist:
            added = await state.denylist.extend(denylist)
            logger.info("Seeded denylist with %d new account(s)", added)
        return manager

    # Moderators

    async def add_moderators(self, moderators: List[str], context: CallContext) -> None:
        """Add moderators. Callable by the registry account or an existing moderator."""
        async with self._lock:
            assert_one_deposit(context, self.required_deposit)
            await assert_not_in_denylist(self.state, context)
            await assert_owner_or_moderator(self.state, context)
            for moderator in moderators:
                await assert_not_in_denylist(self.state, context, moderator)

            added = await self.state.moderators.extend(moderators)
            logger.info("%s added %d moderator(s): %s", context.signer_account_id, added, moderators)

    async def remove_moderators(self, moderators: List[str], context: CallContext) -> None:
        """Remove moderators. Accounts that are not moderators are skipped."""
        async with self._lock:
            assert_one_deposit(context, self.required_deposit)
            await assert_owner_or_moderator(self.state, context)

            removed = 0
            for moderator in moderators:
                if await self.state.moderators.remove(moderator):
                    removed += 1
            logger.info("%s removed %d moderator(s): %s", context.signer_account_id, removed, moderators)

    async def get_moderators(self, limit: Optional[int] = None, from_index: int = 0) -> List[str]:
        async with self._lock:
            limit = self.default_page_limit if limit is None else limit
            return paginate(await self.state.moderators.to_list(), limit, from_index)

    # Authors

    async def register(self, context: CallContext) -> None:
        """Register the caller as an author. Registering twice has no further effect."""
        async with self._lock:
            assert_one_deposit(context, self.required_deposit)
            await assert_not_in_denylist(self.state, context)

            if await self.state.authors.add(context.signer_account_id):
                logger.info(
                    "Registered author %s (%d authors)", context.signer_account_id, await self.state.authors.size()
                )
            else:
                logger.debug("Author %s was already registered", context.signer_account_id)

    async def get_authors(self, limit: Optional[int] = None, from_index: int = 0) -> List[str]:
        async with self._lock:
            limit = self.default_page_limit if limit is None else limit
            return paginate(await self.state.authors.to_list(), limit, from_index)

    # Blog posts

    async def create_blog_post(
        self, title: str, content_ref: str, thumbnail_ref: str, context: CallContext
    ) -> BlogPost:
        """Create a post authored by the caller, keyed by the call's random seed."""
        async with self._lock:
            await assert_is_author(self.state, context)

            blog_post = BlogPost.create(title, content_ref, thumbnail_ref, context)
            if await self.state.blog_posts.contains(blog_post.id):
                raise Conflict("A blog post with this ID already exists!")

            await self.state.blog_posts.set(blog_post.id, blog_post.to_document())
            logger.info("Created blog post %s by %s", blog_post.id, context.signer_account_id)
            return blog_post

    async def update_blog_post(self, blog_id: str, update_blog: Dict[str, Any], context: CallContext) -> BlogPost:
        """
        Update a post owned by the caller.

        The patch is applied all-or-nothing: a patch containing any key outside
        `UPDATABLE_FIELDS` is ignored without error, and the unchanged post is returned.

        Raises:
            PermissionDenied: If the caller is not an author or does not own the post.
            NotFound: If the post does not exist.
            Denylisted: If the patch transfers the post to a denylisted account.
        """
        async with self._lock:
            await assert_is_author(self.state, context)

            blog_post = blog_post_or_none(await self.state.blog_posts.get(blog_id))
            if blog_post is None:
                raise NotFound("The requested blog post doesn't exist!")

            new_author = update_blog.get("author_id")
            if new_author and not isinstance(new_author, str):
                raise InvalidArgument("author_id must be a string")
            if new_author:
                await assert_not_in_denylist(self.state, context, new_author)

            if blog_post.update(update_blog, context.signer_account_id):
                logger.info("Updated blog post %s fields %s", blog_id, sorted(update_blog))
            else:
                logger.info("Ignored update of blog post %s with fields %s", blog_id, sorted(update_blog))

            await self.state.blog_posts.set(blog_id, blog_post.to_document())
            return blog_post

    async def remove_blog_post(self, blog_id: str, context: CallContext) -> BlogPost:
        """Remove a post owned by the caller and return it."""
        async with self._lock:
            await assert_is_author(self.state, context)

            blog_post = blog_post_or_none(await self.state.blog_posts.get(blog_id))
            if blog_post is None:
                raise NotFound("The requested blog post doesn't exist!")

            if context.signer_account_id != blog_post.author_id:
                raise PermissionDenied("You don't have permission to perform this action!")

            removed = await self.state.blog_posts.remove(blog_id)
            logger.info("Removed blog post %s by %s", blog_id, context.signer_account_id)
            return BlogPost.reconstruct(removed) if removed is not None else blog_post

    async def get_blog_post(self, blog_id: str) -> Optional[BlogPost]:
        async with self._lock:
            return blog_post_or_none(await self.state.blog_posts.get(blog_id))

    async def get_blog_posts(
        self, limit: Optional[int] = None, from_index: int = 0, author_id: Optional[str] = None
    ) -> List[BlogPost]:
        """List posts in insertion order, filtered by author when `author_id` is non-empty."""
        async with self._lock:
            limit = self.default_page_limit if limit is None else limit
            posts = [BlogPost.reconstruct(doc) for doc in await self.state.blog_posts.values()]
            if author_id:
                posts = [post for post in posts if post.author_id == author_id]
            return paginate(posts, limit, from_index)

    # Denylist administration (not exposed on the HTTP surface)

    async def denylist_add(self, accounts: List[str]) -> int:
        async with self._lock:
            added = await self.state.denylist.extend(accounts)
            logger.info("Denylisted %d account(s): %s", added, accounts)
            return added

    async def denylist_remove(self, accounts: List[str]) -> int:
        async with self._lock:
            removed = 0
            for account_id in accounts:
                if await self.state.denylist.remove(account_id):
                    removed += 1
            logger.info("Removed %d account(s) from the denylist: %s", removed, accounts)
            return removed

    async def get_denylist(self) -> List[str]:
        async with self._lock:
            return await self.state.denylist.to_list()
