"""Linking session adapter."""

from .session import InMemoryLinkingSessionStore

__all__ = ["InMemoryLinkingSessionStore"]
