"""
# Models Package

Pydantic models of the blog registry.

```python
from blog_registry.models import BlogPost, CallContext
```
"""

from blog_registry.models.blog_models import (
    UPDATABLE_FIELDS,
    BlogPost,
    BlogPostIdRequest,
    CallContext,
    CreateBlogPostRequest,
    HealthResponse,
    ModeratorsRequest,
    RegisterRequest,
    UpdateBlogPostRequest,
)

__all__ = [
    "UPDATABLE_FIELDS",
    "BlogPost",
    "BlogPostIdRequest",
    "CallContext",
    "CreateBlogPostRequest",
    "HealthResponse",
    "ModeratorsRequest",
    "RegisterRequest",
    "UpdateBlogPostRequest",
]
