"""Base class for domain services."""

from typing import Any, ClassVar

import logfire


class Service:
    """Base class for domain services.

    Services hold the identity rules that span users and their provider
    links. Each one traces its operations under ``span_prefix``.
    """

    span_prefix: ClassVar[str] = "service"

    def span(self, operation: str, **attributes: Any) -> logfire.LogfireSpan:
        """Open a Logfire span named ``<span_prefix>.<operation>``."""
        return logfire.span(f"{self.span_prefix}.{operation}", **attributes)
