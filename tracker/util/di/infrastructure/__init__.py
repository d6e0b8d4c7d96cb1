"""Infrastructure providers."""

# Import bases
from .google import GoogleProvider
from .line import LineProvider
from .linking import LinkingProvider
from .oauth import OAuthAggregatorProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .google import ProdGoogleProvider  # noqa: F401
from .line import ProdLineProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "GoogleProvider",
    "LineProvider",
    "LinkingProvider",
    "OAuthAggregatorProvider",
    "PersistenceProvider",
    "ProdGoogleProvider",
    "ProdLineProvider",
    "ProdPersistenceProvider",
]
