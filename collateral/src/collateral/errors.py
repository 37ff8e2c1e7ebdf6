"""
Exceptions raised by collateral selection.

Absence of a collateral solution is not an error: the core API returns None.
These exceptions cover wallet-level failures and broken internal invariants.
"""

from __future__ import annotations

from typing import TypeVar

from loguru import logger

T = TypeVar("T")


class CollateralError(Exception):
    """Base exception for collateral handling."""

    pass


class InsufficientCollateralError(CollateralError):
    """Raised when the wallet holds no UTXOs usable as collateral."""

    pass


class CollateralReturnError(CollateralError):
    """Raised when a collateral return output cannot be built."""

    pass


class ImpossibleError(RuntimeError):
    """
    An internal invariant was violated.

    This always indicates a bug in collateral-select or in the assumptions it
    makes about ledger values, never a problem with the caller's wallet.
    """

    def __init__(self, location: str, reason: str) -> None:
        self.location = location
        self.reason = reason
        super().__init__(
            f"Impossible happened in {location}: {reason}. "
            "This is a bug, please report it to the collateral-select maintainers."
        )


def impossible(location: str, reason: str) -> ImpossibleError:
    """
    Log and build an ImpossibleError for the given location.

    Usage: ``raise impossible("select.filter_sufficient", "coin overflow")``
    """
    logger.critical(f"Internal invariant violated in {location}: {reason}")
    return ImpossibleError(location, reason)


def expect(value: T | None, location: str, reason: str) -> T:
    """Unwrap the result of a checked operation, aborting on failure."""
    if value is None:
        raise impossible(location, reason)
    return value
