"""Provider name lookups shared by the use cases."""

from tracker.domain.error import ProviderDisabledError
from tracker.domain.service import ProviderClient
from tracker.domain.value import ProviderKind


def parse_provider(name: str) -> ProviderKind:
    """Map a path segment to a known provider.

    Raises:
        ProviderDisabledError: If no such provider exists
    """
    try:
        return ProviderKind(name.lower())
    except ValueError:
        raise ProviderDisabledError(name)


def select_client(
    name: str, clients: dict[ProviderKind, ProviderClient]
) -> ProviderClient:
    """Find the client for an enabled provider.

    Only enabled providers are present in ``clients``.

    Raises:
        ProviderDisabledError: If the provider is unknown or not configured
    """
    client = clients.get(parse_provider(name))
    if client is None:
        raise ProviderDisabledError(name)
    return client
