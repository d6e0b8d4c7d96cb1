"""Linking session store interface."""

from abc import ABC, abstractmethod
from typing import Optional

from tracker.domain.value import BrowserSessionId, ProviderKind, UserId


class LinkingSessionStore(ABC):
    """Short-lived correlation store for the provider redirect round-trip.

    Holds at most one pending entry per browser session. The store knows
    nothing about identities or providers beyond what it is handed.
    """

    @abstractmethod
    async def begin(
        self,
        browser_session_id: BrowserSessionId,
        initiating_user_id: Optional[UserId],
        provider: Optional[ProviderKind] = None,
    ) -> str:
        """Start a round-trip, replacing any pending one.

        Args:
            browser_session_id: Browser session cookie value
            initiating_user_id: User attaching a provider, None for plain login
            provider: Provider the round-trip is bound to

        Returns:
            Anti-forgery token to send as the OAuth state parameter
        """
        pass

    @abstractmethod
    async def pending_token(
        self,
        browser_session_id: BrowserSessionId,
        provider: Optional[ProviderKind] = None,
    ) -> Optional[str]:
        """Read the pending token without consuming it.

        Args:
            browser_session_id: Browser session cookie value
            provider: If given, only a session bound to this provider counts

        Returns:
            The token if a live session exists, None otherwise
        """
        pass

    @abstractmethod
    async def consume(
        self,
        browser_session_id: BrowserSessionId,
        supplied_token: str,
        provider: Optional[ProviderKind] = None,
    ) -> Optional[UserId]:
        """Take the pending session exactly once.

        The entry is removed whether or not the token matches.

        Args:
            browser_session_id: Browser session cookie value
            supplied_token: State value returned by the provider
            provider: Provider whose callback is being handled

        Returns:
            The initiating user id, or None for a plain login

        Raises:
            LinkNotPendingError: If nothing is pending or it expired
            LinkTokenMismatchError: If the token or provider does not match
        """
        pass
