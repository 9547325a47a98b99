"""Notification delivery exceptions."""

from __future__ import annotations


class NotifierError(Exception):
    """Base exception for notification delivery errors."""


class TransportError(NotifierError):
    """A connect / authenticate / send / disconnect step failed."""
