"""Core DI providers (non-mockable)."""

from dishka import Scope, provide
import logfire

from tracker.config import AuthSettings, Settings
from tracker.domain.value import ProviderCapabilities, ProviderKind
from tracker.util.di.base import ProviderBase
from tracker.util.error import ConfigurationError

DEFAULT_JWT_SECRET = "CHANGE_ME_IN_PRODUCTION"


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment.

        Raises:
            ConfigurationError: If production runs with the default JWT secret
        """
        settings = Settings()
        if (
            settings.environment == "production"
            and settings.auth.jwt_secret == DEFAULT_JWT_SECRET
        ):
            raise ConfigurationError(
                "AUTH__JWT_SECRET", "must be changed from the default in production"
            )
        return settings

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_capabilities(self, auth_settings: AuthSettings) -> ProviderCapabilities:
        """Provide the provider capability table.

        A provider is enabled when both its client id and secret are set.
        """
        capabilities = ProviderCapabilities(
            enabled={
                ProviderKind.GOOGLE: bool(
                    auth_settings.google.client_id and auth_settings.google.client_secret
                ),
                ProviderKind.LINE: bool(
                    auth_settings.line.client_id and auth_settings.line.client_secret
                ),
            }
        )
        enabled = [p.value for p in capabilities.enabled_providers()]
        if not enabled:
            logfire.warn("No identity provider configured, sign-in is unavailable")
        else:
            logfire.info("Identity providers enabled", providers=enabled)
        return capabilities
