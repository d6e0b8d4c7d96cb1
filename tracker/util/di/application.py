"""Application layer DI providers."""

from dishka import Scope, provide

from tracker.application.usecase.account import (
    ListLinkedAccountsUseCase,
    UnlinkAccountUseCase,
)
from tracker.application.usecase.auth import (
    CompleteLoginUseCase,
    GetCurrentUserUseCase,
    PrepareLinkUseCase,
    StartLinkUseCase,
    StartLoginUseCase,
)
from tracker.domain.repository import LinkingSessionStore
from tracker.domain.service import IdentityResolver, ProviderClient, TokenIssuer
from tracker.domain.value import ProviderKind
from tracker.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_start_login_use_case(
        self,
        oauth_clients: dict[ProviderKind, ProviderClient],
        session_store: LinkingSessionStore,
    ) -> StartLoginUseCase:
        """Provide start login use case."""
        return StartLoginUseCase(
            oauth_clients=oauth_clients, session_store=session_store
        )

    @provide(scope=Scope.REQUEST)
    def get_prepare_link_use_case(
        self,
        oauth_clients: dict[ProviderKind, ProviderClient],
        session_store: LinkingSessionStore,
        identity_resolver: IdentityResolver,
    ) -> PrepareLinkUseCase:
        """Provide prepare link use case."""
        return PrepareLinkUseCase(
            oauth_clients=oauth_clients,
            session_store=session_store,
            identity_resolver=identity_resolver,
        )

    @provide(scope=Scope.REQUEST)
    def get_start_link_use_case(
        self,
        oauth_clients: dict[ProviderKind, ProviderClient],
        session_store: LinkingSessionStore,
    ) -> StartLinkUseCase:
        """Provide start link use case."""
        return StartLinkUseCase(
            oauth_clients=oauth_clients, session_store=session_store
        )

    @provide(scope=Scope.REQUEST)
    def get_complete_login_use_case(
        self,
        oauth_clients: dict[ProviderKind, ProviderClient],
        session_store: LinkingSessionStore,
        identity_resolver: IdentityResolver,
        token_issuer: TokenIssuer,
    ) -> CompleteLoginUseCase:
        """Provide complete login use case."""
        return CompleteLoginUseCase(
            oauth_clients=oauth_clients,
            session_store=session_store,
            identity_resolver=identity_resolver,
            token_issuer=token_issuer,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, identity_resolver: IdentityResolver
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(identity_resolver=identity_resolver)

    # Account use cases
    @provide(scope=Scope.REQUEST)
    def get_list_linked_accounts_use_case(
        self, identity_resolver: IdentityResolver
    ) -> ListLinkedAccountsUseCase:
        """Provide list linked accounts use case."""
        return ListLinkedAccountsUseCase(identity_resolver=identity_resolver)

    @provide(scope=Scope.REQUEST)
    def get_unlink_account_use_case(
        self, identity_resolver: IdentityResolver
    ) -> UnlinkAccountUseCase:
        """Provide unlink account use case."""
        return UnlinkAccountUseCase(identity_resolver=identity_resolver)
