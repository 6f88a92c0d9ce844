from __future__ import annotations


class RosterError(Exception):
    """Base class for roster builder failures."""


class InvalidInputError(RosterError):
    """Clan definitions or indices the builder cannot work with."""


class NotFoundError(RosterError):
    """A referenced clan, player or roster position does not exist."""
