"""Linked account management use cases."""

from .list_linked_accounts import ListLinkedAccountsUseCase
from .unlink_account import UnlinkAccountUseCase

__all__ = ["ListLinkedAccountsUseCase", "UnlinkAccountUseCase"]
