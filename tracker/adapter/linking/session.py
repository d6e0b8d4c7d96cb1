"""Linking session storage for the provider redirect round-trip."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import logfire

from tracker.domain.error import LinkNotPendingError, LinkTokenMismatchError
from tracker.domain.model import LinkingSession
from tracker.domain.repository import LinkingSessionStore
from tracker.domain.value import BrowserSessionId, ProviderKind, UserId

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryLinkingSessionStore(LinkingSessionStore):
    """In-memory linking session store.

    Sufficient because sessions only live for the length of one redirect
    round-trip (10 minutes by default). A server restart just means the
    user starts the sign-in again.

    Expiry is lazy: an entry past its TTL is treated as absent and purged
    the next time it is touched. ``consume`` pops before comparing, so of
    two concurrent callbacks for one browser session only the first can
    see the entry.

    Attributes:
        _sessions: Dict mapping browser session id -> LinkingSession
    """

    def __init__(self, ttl: timedelta = timedelta(minutes=10), clock: Clock = utc_now):
        """Initialize empty session store.

        Args:
            ttl: How long a pending session stays usable
            clock: Source of the current time
        """
        self.ttl = ttl
        self._clock = clock
        self._sessions: dict[BrowserSessionId, LinkingSession] = {}

    async def begin(
        self,
        browser_session_id: BrowserSessionId,
        initiating_user_id: Optional[UserId],
        provider: Optional[ProviderKind] = None,
    ) -> str:
        """Start a round-trip, replacing any pending one."""
        self._purge_expired()

        token = secrets.token_urlsafe(32)
        self._sessions[browser_session_id] = LinkingSession(
            browser_session_id=browser_session_id,
            token=token,
            initiating_user_id=initiating_user_id,
            provider=provider,
            created_at=self._clock(),
        )

        logfire.info(
            "Linking session started",
            provider=provider.value if provider else None,
            linking=initiating_user_id is not None,
        )
        return token

    async def pending_token(
        self,
        browser_session_id: BrowserSessionId,
        provider: Optional[ProviderKind] = None,
    ) -> Optional[str]:
        """Read the pending token without consuming it."""
        session = self._live(browser_session_id)
        if not session:
            return None
        if provider is not None and session.provider not in (None, provider):
            return None
        return session.token

    async def consume(
        self,
        browser_session_id: BrowserSessionId,
        supplied_token: str,
        provider: Optional[ProviderKind] = None,
    ) -> Optional[UserId]:
        """Take the pending session exactly once."""
        session = self._live(browser_session_id)
        # Removed before any comparison so a replay can never see it again
        self._sessions.pop(browser_session_id, None)

        if not session:
            raise LinkNotPendingError(browser_session_id)

        if not secrets.compare_digest(
            session.token.encode("utf-8"), supplied_token.encode("utf-8")
        ):
            raise LinkTokenMismatchError(browser_session_id)

        if provider is not None and session.provider not in (None, provider):
            raise LinkTokenMismatchError(browser_session_id)

        return session.initiating_user_id

    def _live(self, browser_session_id: BrowserSessionId) -> Optional[LinkingSession]:
        session = self._sessions.get(browser_session_id)
        if session and self._is_expired(session):
            del self._sessions[browser_session_id]
            return None
        return session

    def _is_expired(self, session: LinkingSession) -> bool:
        return session.created_at + self.ttl <= self._clock()

    def _purge_expired(self) -> None:
        expired = [sid for sid, s in self._sessions.items() if self._is_expired(s)]
        for sid in expired:
            del self._sessions[sid]
