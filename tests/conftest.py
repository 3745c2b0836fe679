import itertools

import pytest
from shopify_admin_api.core.errors import AuthenticationError
from shopify_admin_api.core.store import EXCHANGE_TOKEN_KEY, InMemoryCredentialStore

SHOP = "a.example.com"
VERSIONS_URL = f"https://{SHOP}/admin/api/unstable/graphql.json"

VERSIONS_PAYLOAD = {
    "data": {
        "publicApiVersions": [
            {"handle": "2023-10", "displayName": "2023-10", "supported": True},
            {"handle": "2024-01", "displayName": "2024-01 (Latest)", "supported": True},
            {
                "handle": "unstable",
                "displayName": "unstable",
                "supported": False,
            },
        ]
    }
}


class FakeReauthenticator:
    """Writes numbered tokens into the store and counts invocations."""

    def __init__(self, store, *, fail=False):
        self.store = store
        self.fail = fail
        self.authenticate_calls = 0
        self.reauthenticate_calls = 0
        self._counter = itertools.count(1)

    def _issue(self):
        if self.fail:
            raise AuthenticationError("login cancelled")
        self.store.set(EXCHANGE_TOKEN_KEY, f"token-{next(self._counter)}")

    async def authenticate(self):
        self.authenticate_calls += 1
        self._issue()

    async def reauthenticate(self):
        self.reauthenticate_calls += 1
        self._issue()


@pytest.fixture
def store():
    return InMemoryCredentialStore()


@pytest.fixture
def reauth(store):
    return FakeReauthenticator(store)
