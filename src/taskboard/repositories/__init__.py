"""Repositories encapsulating persistence logic."""

from __future__ import annotations

from .users import UserRepository

__all__ = ["UserRepository"]
