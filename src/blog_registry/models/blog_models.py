"""
# Blog Registry Models

This module defines the data structures of the blog registry: the `BlogPost` entity
with its update/reconstruct behavior, the per-call `CallContext`, and the request
models of the remote-procedure surface.

## Domain Model Overview

- **BlogPost**: A post whose content lives in an external content-addressed store.
  The registry only keeps opaque references (`content_ref`, `thumbnail_ref`).
- **CallContext**: Trusted per-invocation inputs (calling account, attached deposit,
  timestamp, random seed) supplied by the hosting environment.

## Key Behaviors

### 1. Creation
`BlogPost.create()` takes its `id` from the call's random seed and its author and
timestamps from the call context.

### 2. All-or-nothing, silent patch
`BlogPost.update()` applies a patch only when it is non-empty and every key is an
updatable field. A patch with any unknown key is ignored entirely without error.
This mirrors the deployed behavior and is most likely a defect; it is kept as is.

### 3. `last_updated_at`
The field is set at creation and is not refreshed by `update()`.

## Usage Examples

```python
post = BlogPost.create("Hello", "bafy...content", "bafy...thumb", context)
post.update({"title": "Hello, world"}, signer_account_id=context.signer_account_id)
document = post.to_document()
same_post = BlogPost.reconstruct(document)
```

Attributes:
    UPDATABLE_FIELDS (List[str]): Keys accepted in an update patch.
"""

import secrets
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from blog_registry.managers.blog_security import InvalidArgument, PermissionDenied

UPDATABLE_FIELDS = ["author_id", "title", "content_ref", "thumbnail_ref"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_random_seed() -> str:
    """Per-call nonce used as the id of any post created during the call."""
    return secrets.token_hex(32)


class CallContext(BaseModel):
    """Trusted inputs for a single registry invocation.

    Attributes:
        signer_account_id (str): The calling account.
        current_account_id (str): The registry's own (deploying) account.
        attached_deposit (int): Payment attached to the call, in minimal currency units.
        block_timestamp (datetime): Current time of the call.
        random_seed (str): Cryptographically strong per-call nonce.
    """

    model_config = ConfigDict(frozen=True)

    signer_account_id: str = Field(..., min_length=1, description="Calling account")
    current_account_id: str = Field(..., min_length=1, description="Registry account")
    attached_deposit: int = Field(0, description="Attached deposit")
    block_timestamp: datetime = Field(default_factory=utc_now, description="Call timestamp")
    random_seed: str = Field(default_factory=new_random_seed, description="Per-call nonce")


class BlogPost(BaseModel):
    """A single blog post.

    Attributes:
        id (str): Unique identifier, assigned at creation. Immutable.
        title (str): Post title.
        content_ref (str): Reference to the content in the external store.
        thumbnail_ref (str): Reference to the thumbnail in the external store.
        author_id (str): Current author.
        created_at (datetime): Creation time. Immutable.
        last_updated_at (datetime): Set at creation; not refreshed on update.
    """

    id: str = Field(..., description="Blog post ID")
    title: str = Field(..., description="Post title")
    content_ref: str = Field(..., description="Content reference")
    thumbnail_ref: str = Field(..., description="Thumbnail reference")
    author_id: str = Field(..., description="Author account ID")
    created_at: datetime = Field(..., description="Creation timestamp")
    last_updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def create(cls, title: str, content_ref: str, thumbnail_ref: str, context: CallContext) -> "BlogPost":
        """Build a new post authored by the calling account."""
        return cls(
            id=context.random_seed,
            title=title,
            content_ref=content_ref,
            thumbnail_ref=thumbnail_ref,
            author_id=context.signer_account_id,
            created_at=context.block_timestamp,
            last_updated_at=context.block_timestamp,
        )

    def update(self, patch: Dict[str, Any], signer_account_id: str) -> bool:
        """
        Apply `patch` to the post.

        Only the current author may update the post. The patch is applied when it is
        non-empty and every key is in `UPDATABLE_FIELDS`; otherwise nothing is applied
        and no error is raised.

        Args:
            patch (Dict[str, Any]): Field values to apply.
            signer_account_id (str): The calling account.

        Returns:
            bool: True when the patch was applied, False when it was silently ignored.

        Raises:
            PermissionDenied: If the signer is not the post's author.
            InvalidArgument: If a recognized field carries a non-string value or an empty author.
        """
        if signer_account_id != self.author_id:
            raise PermissionDenied("You do not have permission to perform this action!")

        keys = list(patch.keys())
        if not keys or not all(key in UPDATABLE_FIELDS for key in keys):
            return False

        for key in keys:
            if not isinstance(patch[key], str):
                raise InvalidArgument(f"Field '{key}' must be a string")
        if "author_id" in patch and not patch["author_id"]:
            raise InvalidArgument("Field 'author_id' must not be empty")

        for key in keys:
            setattr(self, key, patch[key])
        return True

    @classmethod
    def reconstruct(cls, document: Dict[str, Any]) -> "BlogPost":
        """Rebuild a post from its persisted document (timestamps may be ISO strings)."""
        return cls(
            id=document["id"],
            title=document["title"],
            content_ref=document["content_ref"],
            thumbnail_ref=document["thumbnail_ref"],
            author_id=document["author_id"],
            created_at=document["created_at"],
            last_updated_at=document["last_updated_at"],
        )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


# Request Models
class ModeratorsRequest(BaseModel):
    """Request model for `add_moderators` and `remove_moderators`."""

    moderators: List[str] = Field(..., description="Moderator account IDs")


class RegisterRequest(BaseModel):
    """`register` takes no arguments; the caller registers itself."""

    model_config = ConfigDict(extra="forbid")


class CreateBlogPostRequest(BaseModel):
    """
    Request model for creating a blog post.

    The content and thumbnail are stored elsewhere; only their references are sent.
    """

    title: str = Field(..., description="Post title")
    content_ref: str = Field(..., description="Content reference")
    thumbnail_ref: str = Field(..., description="Thumbnail reference")


class UpdateBlogPostRequest(BaseModel):
    """
    Request model for updating a blog post.

    `update_blog` is kept as a free-form mapping: unknown keys must reach the entity
    so that the whole patch is ignored rather than partially applied.
    """

    blog_id: str = Field(..., description="Blog post ID")
    update_blog: Dict[str, Any] = Field(default_factory=dict, description="Fields to update")


class BlogPostIdRequest(BaseModel):
    """Request model for operations addressing a single post."""

    blog_id: str = Field(..., description="Blog post ID")


class HealthResponse(BaseModel):
    status: str
    storage_backend: str
    storage_healthy: bool
    timestamp: datetime = Field(default_factory=utc_now)


def blog_post_or_none(document: Optional[Dict[str, Any]]) -> Optional[BlogPost]:
    return BlogPost.reconstruct(document) if document is not None else None
