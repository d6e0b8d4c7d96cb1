"""Errors raised while wiring the service together."""


class UtilError(Exception):
    """Base utility error."""


class ConfigurationError(UtilError):
    """A setting makes it unsafe or impossible to start.

    Attributes:
        setting: Environment variable the operator has to fix
    """

    def __init__(self, setting: str, message: str):
        self.setting = setting
        super().__init__(f"{setting}: {message}")


class DependencyInjectionError(UtilError):
    """A mockable component lacks the requested implementation."""

    def __init__(self, component: str, use_mock: bool):
        self.component = component
        self.use_mock = use_mock
        kind = "mock" if use_mock else "production"
        super().__init__(f"No {kind} implementation for {component}")
