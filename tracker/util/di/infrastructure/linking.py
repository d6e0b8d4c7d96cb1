"""Linking session infrastructure provider."""

from datetime import timedelta

from dishka import Scope, provide

from tracker.adapter.linking import InMemoryLinkingSessionStore
from tracker.config import AuthSettings
from tracker.domain.repository import LinkingSessionStore
from tracker.util.di.base import ProviderBase


class LinkingProvider(ProviderBase):
    """Linking session store provider - concrete, no mocks needed.

    APP-scoped: the store must outlive the request that began a round-trip.
    """

    @provide(scope=Scope.APP)
    def get_session_store(self, auth_settings: AuthSettings) -> LinkingSessionStore:
        """Provide in-memory linking session store."""
        return InMemoryLinkingSessionStore(
            ttl=timedelta(seconds=auth_settings.linking_session_ttl_seconds)
        )
