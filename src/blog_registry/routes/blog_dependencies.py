"""
# Blog Registry Call Context Dependencies

FastAPI dependencies supplying the trusted per-call inputs of the registry:
who is calling, what deposit is attached, the current time, and a fresh random seed.

## Headers

- `X-Signer-Account-Id`: the calling account (required on mutating calls).
- `X-Attached-Deposit`: attached deposit in minimal currency units (default `0`).

The registry's own account (`current_account_id`) comes from `settings.REGISTRY_ACCOUNT_ID`.

## Usage

```python
@router.post("/register")
async def register(
    context: CallContext = Depends(require_call_context),
    registry: BlogRegistryManager = Depends(get_registry),
):
    await registry.register(context)
```
"""

from typing import Optional

from fastapi import Header, HTTPException, Request, status

from blog_registry.config import settings
from blog_registry.managers.blog_registry_manager import BlogRegistryManager
from blog_registry.models.blog_models import CallContext, new_random_seed, utc_now


async def get_registry(request: Request) -> BlogRegistryManager:
    """Return the registry created by the application lifespan."""
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Registry is not initialized",
        )
    return registry


async def require_call_context(
    x_signer_account_id: Optional[str] = Header(None),
    x_attached_deposit: int = Header(0),
) -> CallContext:
    """
    Build the `CallContext` of a mutating call.

    Raises:
        HTTPException(401): If no signer account is given.
    """
    signer = (x_signer_account_id or "").strip()
    if not signer:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Signer-Account-Id header",
        )

    return CallContext(
        signer_account_id=signer,
        current_account_id=settings.REGISTRY_ACCOUNT_ID,
        attached_deposit=x_attached_deposit,
        block_timestamp=utc_now(),
        random_seed=new_random_seed(),
    )
