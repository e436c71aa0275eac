from uuid import uuid4

import pytest

from blog_registry.database.state_store import RegistryState
from blog_registry.managers.blog_registry_manager import BlogRegistryManager
from blog_registry.models.blog_models import CallContext

REGISTRY_ACCOUNT = "blog-registry"


@pytest.fixture
def state():
    return RegistryState.in_memory(denylist=["mallory"])


@pytest.fixture
def registry(state):
    return BlogRegistryManager(state, required_deposit=1, default_page_limit=20)


@pytest.fixture
def make_context():
    def _make(signer: str, deposit: int = 0, seed: str = None) -> CallContext:
        return CallContext(
            signer_account_id=signer,
            current_account_id=REGISTRY_ACCOUNT,
            attached_deposit=deposit,
            random_seed=seed or uuid4().hex,
        )

    return _make
