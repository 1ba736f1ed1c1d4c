"""Exceptions raised by the grouping engine and its callers."""

from typing import Iterable


class GroupingException(Exception):
    """Base exception for all groupmaker errors."""

    pass


class ConfigurationError(GroupingException, ValueError):
    """Raised before any computation when options or arguments are unusable."""

    pass


class UnplaceableUserError(GroupingException, RuntimeError):
    """Raised when users are still unplaced after every relaxation tier."""

    def __init__(self, user_ids: Iterable[str]):
        self.user_ids = list(user_ids)
        super().__init__(f"Could not place users: {', '.join(self.user_ids)}")


class RosterError(GroupingException):
    """Raised when a roster cannot be read or parsed."""

    pass
