"""Collaboration state layered over parsed documents."""

from .session import CollaborationComment, ReviewSession, UnknownChangeError

__all__ = ["CollaborationComment", "ReviewSession", "UnknownChangeError"]
