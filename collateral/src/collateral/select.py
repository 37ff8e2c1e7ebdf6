"""
Collateral selection for script transactions.

Picks the set of wallet UTXOs to put up as collateral. Among the sets that
hold enough ada, prefer the one whose collateral return output needs the
least ada locked in it, then the one with fewer inputs, then the cheapest.

The search runs as a pipeline of independent stages:

    sort -> truncate -> enumerate -> filter -> score -> select

Only the MAX_CANDIDATE_UTXOS most valuable UTXOs are searched. Wallets whose
only viable collateral lies beyond that bound get no result: this keeps the
search at 2**10 - 1 subsets and is accepted as an approximation.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from functools import cmp_to_key

from loguru import logger

from collateral.config import CollateralSettings, get_settings
from collateral.constants import MAX_CANDIDATE_UTXOS
from collateral.errors import InsufficientCollateralError, expect
from collateral.min_ada import collateral_return_min_ada_value
from collateral.models import (
    TransactionUnspentOutput,
    UtxoMap,
    address_has_key_payment,
    sum_coins,
)

Subset = tuple[TransactionUnspentOutput, ...]


@dataclass(frozen=True)
class Candidate:
    """A collateral set that passed the value filter, with its scores."""

    utxos: Subset
    return_min_ada: int
    total_value: int

    @property
    def input_count(self) -> int:
        return len(self.utxos)


def by_return_min_ada(candidate: Candidate) -> int:
    return candidate.return_min_ada


def by_input_count(candidate: Candidate) -> int:
    return candidate.input_count


def by_total_value(candidate: Candidate) -> int:
    return candidate.total_value


# Criteria in priority order, each breaking ties left by the previous one.
# The boolean is True for ascending order.
CANDIDATE_ORDERING: list[tuple[Callable[[Candidate], int], bool]] = [
    (by_return_min_ada, True),
    (by_input_count, True),
    (by_total_value, True),
]


def compare_candidates(
    a: Candidate,
    b: Candidate,
    ordering: Sequence[tuple[Callable[[Candidate], int], bool]] = CANDIDATE_ORDERING,
) -> int:
    """
    Three-way comparison of two candidates.

    Returns a negative number if a is preferred, positive if b is preferred,
    zero if no criterion tells them apart.
    """
    for key, ascending in ordering:
        left, right = key(a), key(b)
        if left != right:
            result = -1 if left < right else 1
            return result if ascending else -result
    return 0


def sort_by_value_descending(utxos: UtxoMap) -> list[TransactionUnspentOutput]:
    """Materialize a UTXO map, most valuable first. Equal values keep map order."""
    return sorted(
        (TransactionUnspentOutput(input=ref, output=output) for ref, output in utxos.items()),
        key=lambda utxo: utxo.coin,
        reverse=True,
    )


def take_candidate_utxos(
    utxos: Sequence[TransactionUnspentOutput], limit: int = MAX_CANDIDATE_UTXOS
) -> list[TransactionUnspentOutput]:
    return list(utxos[:limit])


def enumerate_subsets(
    utxos: Sequence[TransactionUnspentOutput], max_size: int
) -> Iterator[Subset]:
    """
    Yield every non-empty subset of utxos with at most max_size members.

    Subset members keep the order they have in utxos. The universe must
    already be truncated to MAX_CANDIDATE_UTXOS entries.
    """
    if len(utxos) > MAX_CANDIDATE_UTXOS:
        raise ValueError(
            f"Refusing to enumerate subsets of {len(utxos)} UTXOs "
            f"(limit is {MAX_CANDIDATE_UTXOS})"
        )
    if max_size <= 0:
        return

    for mask in range(1, 1 << len(utxos)):
        if mask.bit_count() > max_size:
            continue
        yield tuple(utxo for i, utxo in enumerate(utxos) if mask >> i & 1)


def filter_sufficient(
    subsets: Iterable[Subset], min_required_collateral: int
) -> Iterator[tuple[Subset, int]]:
    """Keep subsets holding at least min_required_collateral, paired with their total."""
    for subset in subsets:
        total = expect(
            sum_coins(utxo.coin for utxo in subset),
            "select.filter_sufficient",
            "collateral coin total overflowed",
        )
        if total >= min_required_collateral:
            yield subset, total


def score_subsets(
    subsets: Iterable[tuple[Subset, int]], coins_per_utxo_byte: int
) -> list[Candidate]:
    """
    Score each subset by the minimum ada of its collateral return output.

    Subsets whose tokens cannot be combined into one output are dropped.
    """
    candidates = []
    for subset, total in subsets:
        return_min_ada = collateral_return_min_ada_value(coins_per_utxo_byte, subset)
        if return_min_ada is None:
            logger.trace(
                f"Dropping collateral candidate {[str(u.input) for u in subset]}: "
                "tokens do not fit in one output"
            )
            continue
        candidates.append(
            Candidate(utxos=subset, return_min_ada=return_min_ada, total_value=total)
        )
    return candidates


def optimal_candidate(candidates: Iterable[Candidate]) -> Candidate | None:
    """Best candidate under CANDIDATE_ORDERING, or None if there are none."""
    return min(candidates, key=cmp_to_key(compare_candidates), default=None)


def select_collateral(
    coins_per_utxo_byte: int,
    max_collateral_inputs: int,
    min_required_collateral: int,
    utxos: UtxoMap,
) -> list[TransactionUnspentOutput] | None:
    """
    Select collateral UTXOs for a script transaction.

    Args:
        coins_per_utxo_byte: Protocol parameter pricing output bytes
        max_collateral_inputs: Protocol limit on the number of collateral inputs
        min_required_collateral: Minimum lovelace the collateral must hold
        utxos: Spendable wallet UTXOs

    Returns:
        The selected UTXOs, most valuable first, or None if no combination of
        the candidate UTXOs qualifies
    """
    candidate_utxos = take_candidate_utxos(sort_by_value_descending(utxos))
    subsets = enumerate_subsets(candidate_utxos, max_collateral_inputs)
    sufficient = filter_sufficient(subsets, min_required_collateral)
    candidates = score_subsets(sufficient, coins_per_utxo_byte)

    logger.debug(
        f"Collateral search: {len(utxos)} UTXOs, {len(candidate_utxos)} considered, "
        f"{len(candidates)} qualifying sets"
    )

    best = optimal_candidate(candidates)
    if best is None:
        return None

    logger.debug(
        f"Selected collateral: {[str(u.input) for u in best.utxos]} "
        f"(total={best.total_value}, return_min_ada={best.return_min_ada})"
    )
    return list(best.utxos)


def is_collateral_eligible(utxo: TransactionUnspentOutput) -> bool:
    """Only UTXOs locked by a verification key can be used as collateral."""
    return address_has_key_payment(utxo.output.address)


def select_collateral_with_settings(
    utxos: UtxoMap, settings: CollateralSettings | None = None
) -> list[TransactionUnspentOutput] | None:
    """Select collateral among the eligible wallet UTXOs using configured parameters."""
    if settings is None:
        settings = get_settings()

    eligible: UtxoMap = {
        ref: output
        for ref, output in utxos.items()
        if is_collateral_eligible(TransactionUnspentOutput(input=ref, output=output))
    }
    if len(eligible) < len(utxos):
        logger.debug(f"Ignoring {len(utxos) - len(eligible)} script-locked UTXOs")

    return select_collateral(
        coins_per_utxo_byte=settings.coins_per_utxo_byte,
        max_collateral_inputs=settings.max_collateral_inputs,
        min_required_collateral=settings.min_required_collateral,
        utxos=eligible,
    )


def get_wallet_collateral(
    utxos: UtxoMap, settings: CollateralSettings | None = None
) -> list[TransactionUnspentOutput]:
    """
    Like select_collateral_with_settings, for callers that cannot proceed
    without collateral.

    Raises:
        InsufficientCollateralError: If no collateral can be selected
    """
    if settings is None:
        settings = get_settings()

    collateral = select_collateral_with_settings(utxos, settings)
    if collateral is None:
        logger.warning(
            f"No suitable collateral: need {settings.min_required_collateral} lovelace "
            f"in at most {settings.max_collateral_inputs} key-locked UTXOs"
        )
        raise InsufficientCollateralError(
            f"Wallet has no collateral worth {settings.min_required_collateral} lovelace "
            f"within {settings.max_collateral_inputs} inputs"
        )
    return collateral
