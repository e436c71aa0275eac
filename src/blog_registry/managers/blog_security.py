"""
# Blog Registry Access Control

Permission guards and the error taxonomy of the blog registry.

Every mutating registry operation runs some of these guards before it touches any
collection. A guard either returns or raises a `RegistryError`; it never silently
turns the operation into a no-op.

## Guards

- `assert_one_deposit`: the call carries exactly the required deposit.
- `assert_is_author`: the subject (default: the caller) is a registered author.
- `assert_not_in_denylist`: the subject (default: the caller) is not denylisted.
- `assert_owner_or_moderator`: the caller is the registry account or a moderator.

## Errors

| Error | HTTP status |
|---|---|
| `PaymentRequired` | 402 |
| `PermissionDenied` | 403 |
| `Denylisted` | 403 |
| `NotFound` | 404 |
| `Conflict` | 409 |
| `InvalidArgument` | 400 |
"""

from typing import TYPE_CHECKING, Optional

from blog_registry.managers.logging_manager import get_logger

if TYPE_CHECKING:
    from blog_registry.database.state_store import RegistryState
    from blog_registry.models.blog_models import CallContext

logger = get_logger(prefix="[Blog Security]")


class RegistryError(Exception):
    """Base class for every rejected registry call."""

    status_code = 400
    code = "registry_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PaymentRequired(RegistryError):
    status_code = 402
    code = "payment_required"


class PermissionDenied(RegistryError):
    status_code = 403
    code = "permission_denied"


class Denylisted(RegistryError):
    status_code = 403
    code = "denylisted"


class NotFound(RegistryError):
    status_code = 404
    code = "not_found"


class Conflict(RegistryError):
    status_code = 409
    code = "conflict"


class InvalidArgument(RegistryError):
    status_code = 400
    code = "invalid_argument"


def assert_one_deposit(context: "CallContext", required: int = 1) -> None:
    """Assert that the call received exactly `required` units as a deposit."""
    if context.attached_deposit != required:
        logger.warning(
            "Rejected call from %s: deposit %d, expected %d",
            context.signer_account_id,
            context.attached_deposit,
            required,
        )
        raise PaymentRequired(f"You need to deposit exactly {required} unit{'s' if required != 1 else ''}!")


async def assert_is_author(state: "RegistryState", context: "CallContext", account_id: Optional[str] = None) -> None:
    """Assert that the account (by default the caller) is in the authors set."""
    subject = account_id or context.signer_account_id
    if not await state.authors.contains(subject):
        logger.warning("Rejected call from %s: %s is not an author", context.signer_account_id, subject)
        raise PermissionDenied("You are not registered as an author, please register!")


async def assert_not_in_denylist(
    state: "RegistryState", context: "CallContext", account_id: Optional[str] = None
) -> None:
    """Assert that the account (by default the caller) is not in the denylist."""
    subject = account_id or context.signer_account_id
    if await state.denylist.contains(subject):
        logger.warning("Rejected call from %s: %s is denylisted", context.signer_account_id, subject)
        raise Denylisted("This account is in the denylist!")


async def assert_owner_or_moderator(state: "RegistryState", context: "CallContext") -> None:
    """Assert that the caller is the registry account itself or an existing moderator."""
    signer = context.signer_account_id
    if signer == context.current_account_id or await state.moderators.contains(signer):
        return
    logger.warning("Rejected call from %s: not the registry account or a moderator", signer)
    raise PermissionDenied("You do not have permission to perform this action!")
