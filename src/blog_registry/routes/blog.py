"""
# Blog Registry Routes

The remote-procedure surface of the blog registry. Each mutating procedure takes a
single JSON object; views take query parameters.

## API Endpoints

### Moderators
- `POST /registry/add_moderators` - Add moderators (deposit required)
- `POST /registry/remove_moderators` - Remove moderators (deposit required)

### Authors
- `POST /registry/register` - Register the caller as an author (deposit required)
- `GET /registry/get_authors` - List authors (paginated)

### Blog Posts
- `POST /registry/create_blog_post` - Create a post
- `POST /registry/update_blog_post` - Update a post
- `POST /registry/remove_blog_post` - Remove a post
- `GET /registry/get_blog_post` - Read a post (`null` when absent)
- `GET /registry/get_blog_posts` - List posts, optionally by author (paginated)

## Usage Examples

```python
headers = {"X-Signer-Account-Id": "alice.near", "X-Attached-Deposit": "1"}
await client.post("/registry/register", json={}, headers=headers)
response = await client.post(
    "/registry/create_blog_post",
    json={"title": "Hello", "content_ref": "bafy...", "thumbnail_ref": "bafy..."},
    headers=headers,
)
blog_id = response.json()["id"]
```

Attributes:
    router (APIRouter): FastAPI router with `/registry` prefix
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from blog_registry.managers.blog_registry_manager import BlogRegistryManager
from blog_registry.managers.blog_security import RegistryError
from blog_registry.managers.logging_manager import get_logger
from blog_registry.models.blog_models import (
    BlogPost,
    BlogPostIdRequest,
    CallContext,
    CreateBlogPostRequest,
    ModeratorsRequest,
    RegisterRequest,
    UpdateBlogPostRequest,
)
from blog_registry.routes.blog_dependencies import get_registry, require_call_context

logger = get_logger(prefix="[Blog Routes]")

router = APIRouter(prefix="/registry", tags=["registry"])


def _to_http_error(error: RegistryError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


# Moderators

@router.post("/add_moderators", response_model=None)
async def add_moderators(
    request: ModeratorsRequest,
    context: CallContext = Depends(require_call_context),
    registry: BlogRegistryManager = Depends(get_registry),
) -> None:
    """
    Add moderators.

    **Access Control:**
    Requires a deposit of exactly one unit. The caller must be the registry account or a
    moderator, and neither the caller nor any new moderator may be denylisted.

    Raises:
        HTTPException(402): If the deposit is wrong.
        HTTPException(403): If the caller lacks permission or an account is denylisted.
    """
    try:
        await registry.add_moderators(request.moderators, context)
    except RegistryError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error("Failed to add moderators: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to add moderators")


@router.post("/remove_moderators", response_model=None)
async def remove_moderators(
    request: ModeratorsRequest,
    context: CallContext = Depends(require_call_context),
    registry: BlogRegistryManager = Depends(get_registry),
) -> None:
    """Remove moderators. Same access rules as `add_moderators`, without denylist checks."""
    try:
        await registry.remove_moderators(request.moderators, context)
    except RegistryError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error("Failed to remove moderators: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to remove moderators")


# Authors

@router.post("/register", response_model=None)
async def register(
    request: Optional[RegisterRequest] = None,
    context: CallContext = Depends(require_call_context),
    registry: BlogRegistryManager = Depends(get_registry),
) -> None:
    """Register the caller as an author. Requires a deposit of exactly one unit."""
    try:
        await registry.register(context)
    except RegistryError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error("Failed to register author: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to register author")


@router.get("/get_authors", response_model=List[str])
async def get_authors(
    limit: Optional[int] = Query(None, ge=0),
    from_index: int = Query(0, ge=0, alias="from"),
    registry: BlogRegistryManager = Depends(get_registry),
):
    try:
        return await registry.get_authors(limit=limit, from_index=from_index)
    except RegistryError as e:
        raise _to_http_error(e)


# Blog posts

@router.post("/create_blog_post", response_model=BlogPost)
async def create_blog_post(
    request: CreateBlogPostRequest,
    context: CallContext = Depends(require_call_context),
    registry: BlogRegistryManager = Depends(get_registry),
):
    """
    Create a blog post authored by the caller.

    Raises:
        HTTPException(403): If the caller is not a registered author.
    """
    try:
        return await registry.create_blog_post(
            title=request.title,
            content_ref=request.content_ref,
            thumbnail_ref=request.thumbnail_ref,
            context=context,
        )
    except RegistryError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error("Failed to create blog post: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create blog post")


@router.post("/update_blog_post", response_model=BlogPost)
async def update_blog_post(
    request: UpdateBlogPostRequest,
    context: CallContext = Depends(require_call_context),
    registry: BlogRegistryManager = Depends(get_registry),
):
    """
    Update a blog post owned by the caller.

    Only `author_id`, `title`, `content_ref` and `thumbnail_ref` can change. A patch with
    any other key is ignored as a whole and the unchanged post is returned.

    Raises:
        HTTPException(403): If the caller is not the author, or the new author is denylisted.
        HTTPException(404): If the post does not exist.
    """
    try:
        return await registry.update_blog_post(request.blog_id, request.update_blog, context)
    except RegistryError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error("Failed to update blog post %s: %s", request.blog_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update blog post")


@router.post("/remove_blog_post", response_model=BlogPost)
async def remove_blog_post(
    request: BlogPostIdRequest,
    context: CallContext = Depends(require_call_context),
    registry: BlogRegistryManager = Depends(get_registry),
):
    try:
        return await registry.remove_blog_post(request.blog_id, context)
    except RegistryError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error("Failed to remove blog post %s: %s", request.blog_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to remove blog post")


@router.get("/get_blog_post", response_model=Optional[BlogPost])
async def get_blog_post(
    blog_id: str = Query(...),
    registry: BlogRegistryManager = Depends(get_registry),
):
    """Return the post, or `null` when it does not exist."""
    return await registry.get_blog_post(blog_id)


@router.get("/get_blog_posts", response_model=List[BlogPost])
async def get_blog_posts(
    limit: Optional[int] = Query(None, ge=0),
    from_index: int = Query(0, ge=0, alias="from"),
    author_id: Optional[str] = Query(None),
    registry: BlogRegistryManager = Depends(get_registry),
):
    try:
        return await registry.get_blog_posts(limit=limit, from_index=from_index, author_id=author_id)
    except RegistryError as e:
        raise _to_http_error(e)
