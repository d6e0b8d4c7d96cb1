"""Identity provider client interface."""

from typing import Any

import logfire
from pydantic import ValidationError

from tracker.domain.error import ExchangeFailedError
from tracker.domain.value.types import ExternalProfile, ProviderKind


class ProviderClient:
    """Authorization-code client for one identity provider.

    One implementation exists per provider family. Clients are selected
    statically by the route that received the callback.
    """

    provider: ProviderKind

    def authorization_url(self, state: str) -> str:
        """Build the provider's authorization URL.

        Args:
            state: Anti-forgery token echoed back on the callback

        Returns:
            URL to redirect the browser to
        """
        raise NotImplementedError

    async def exchange(self, code: str) -> ExternalProfile:
        """Exchange an authorization code for the user's profile.

        Args:
            code: Authorization code from the callback

        Returns:
            Profile reported by the provider

        Raises:
            ExchangeFailedError: On any HTTP, token or profile failure
        """
        raise NotImplementedError

    def build_profile(self, **fields: Any) -> ExternalProfile:
        """Validate provider-reported fields into a profile.

        Raises:
            ExchangeFailedError: If a field is malformed, e.g. a blank or
                oversized subject id
        """
        try:
            return ExternalProfile(**fields)
        except ValidationError as e:
            logfire.error(
                "Provider returned a malformed profile",
                provider=self.provider.value,
                error=str(e),
            )
            raise ExchangeFailedError(self.provider, "malformed profile") from e
