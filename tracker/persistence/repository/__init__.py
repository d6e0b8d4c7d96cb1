"""PostgreSQL repository implementations."""

from tracker.persistence.repository.account_seed import PostgresAccountSeeder
from tracker.persistence.repository.provider_link import PostgresProviderLinkRegistry

__all__ = [
    "PostgresAccountSeeder",
    "PostgresProviderLinkRegistry",
]
