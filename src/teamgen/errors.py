"""Exceptions shared by the store, generator and API layers."""

from __future__ import annotations


class TeamgenError(Exception):
    """Base class for errors raised by teamgen."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else self.__class__.__name__


class InvalidInputError(TeamgenError, ValueError):
    """Malformed input; the request is rejected with nothing written."""


class RecordNotFound(TeamgenError, KeyError):
    """The targeted id matches no stored record."""


class StoreUnavailable(TeamgenError):
    """The backing database could not be opened."""


class StoreError(TeamgenError):
    """Any other failure reported by the backing database."""
