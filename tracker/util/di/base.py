"""Base class for the tracker's DI providers."""

from typing import ClassVar, Literal

from dishka import Provider

# Infrastructure that tests may swap for an in-process fake
Component = Literal["google", "line", "persistence"]


class ProviderBase(Provider):
    """DI provider with mock/production metadata.

    A mockable component is declared as a base class setting
    ``__mock_component__``; its production and mock implementations
    subclass it and set ``__is_mock__``. Providers without subclasses are
    used as they are.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def is_mockable(cls) -> bool:
        """Whether implementations of this provider can be chosen."""
        return bool(cls.__subclasses__())

    @classmethod
    def implementations(cls) -> dict[bool, type["ProviderBase"]]:
        """Subclasses keyed by their ``__is_mock__`` flag."""
        return {sub.__is_mock__: sub for sub in cls.__subclasses__()}
