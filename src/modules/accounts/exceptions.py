"""Account domain exceptions."""

from __future__ import annotations


class EmailAlreadyRegistered(Exception):
    """Another user already signed up with this e-mail."""


class IncorrectPassword(Exception):
    """The current password supplied for a password change is wrong."""
