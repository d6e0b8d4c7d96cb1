"""Authentication use cases."""

from .complete_login import CompleteLoginUseCase
from .get_current_user import GetCurrentUserUseCase
from .prepare_link import PrepareLinkUseCase
from .start_link import StartLinkUseCase
from .start_login import StartLoginUseCase

__all__ = [
    "CompleteLoginUseCase",
    "GetCurrentUserUseCase",
    "PrepareLinkUseCase",
    "StartLinkUseCase",
    "StartLoginUseCase",
]
