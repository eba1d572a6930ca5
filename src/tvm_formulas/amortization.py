# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
import numpy as np
from dataclasses import dataclass

from tvm_formulas.time_value import (
    TVMDomainError,
    _convert_when,
    pmt,
    ipmt,
    ppmt,
    pmt_vector,
    ipmt_vector,
    ppmt_vector,
)

__version__ = "0.1.0"


# =============================================================================
# Amortization Schedules
# =============================================================================
#
# A schedule tabulates, for every period of a level-payment annuity, the
# payment, its interest and principal portions and the balance before and
# after the payment. Each column comes from the closed-form vector formulas
# in time_value; only the balance is accumulated, from the principal column.
# =============================================================================

def _validate_periods(periods) -> int:
    """Return periods as an int, or raise ValueError unless it is a positive whole number."""
    if not math.isfinite(periods) or int(periods) != periods or periods <= 0:
        raise ValueError(f"periods must be a positive integer, got {periods}")
    return int(periods)


@dataclass
class AmortizationSchedule:
    """
    Container for a level-payment amortization schedule.

    All arrays are indexed by period, length periods + 1. Index 0 is time
    zero: payment, interest and principal are 0.0 and both balances equal
    present_value.

    Balances carry the sign of present_value (a loan received as +10000 has
    a positive balance that principal payments, which are negative, reduce):

        ending_balance[k] = beginning_balance[k] + principal[k]
        beginning_balance[k] = ending_balance[k - 1]      for k >= 1
        payment[k] = interest[k] + principal[k]

    For end-of-period payments the last ending balance is -future_value. For
    start-of-period payments interest for the final period accrues after the
    last payment, so the last ending balance is -future_value / (1 + rate).
    """
    period: np.ndarray
    payment: np.ndarray
    interest: np.ndarray
    principal: np.ndarray
    beginning_balance: np.ndarray
    ending_balance: np.ndarray

    def __len__(self) -> int:
        return len(self.period)

    @property
    def total_interest(self) -> float:
        return float(np.sum(self.interest))

    @property
    def total_principal(self) -> float:
        return float(np.sum(self.principal))


def run_amortization_schedule(
    rate: float,
    periods: int,
    present_value: float,
    future_value: float | None = None,
    when: int | str | None = None
) -> AmortizationSchedule:
    """
    Generate the amortization schedule of a level-payment annuity.

    The payment is pmt(rate, periods, present_value, future_value, when); the
    interest and principal columns are ipmt/ppmt evaluated for every period
    at once.

    Args:
        rate: Interest rate per period as decimal (e.g. 0.01 for 1%)
        periods: Number of payment periods, a positive integer
        present_value: Cash flow at time zero (e.g. loan principal)
        future_value: Balance left after the last payment (default: 0)
        when: 0 or "end" for end-of-period payments, 1 or "begin" for
            start-of-period payments (default: 0)

    Returns:
        AmortizationSchedule with periods + 1 rows

    Raises:
        ValueError: If periods is not a positive integer
        TVMDomainError: Propagated from the payment formulas
    """
    periods = _validate_periods(periods)
    if future_value is None:
        future_value = 0.0
    begin = _convert_when(when)

    # Allocate arrays (period 0 is the initial state)
    period = np.arange(periods + 1)
    payment = np.zeros(periods + 1)
    interest = np.zeros(periods + 1)
    principal = np.zeros(periods + 1)

    schedule_periods = period[1:]
    payment[1:] = pmt_vector(rate, periods, present_value, future_value, begin)
    interest[1:] = ipmt_vector(rate, schedule_periods, periods, present_value, future_value, begin)
    principal[1:] = ppmt_vector(rate, schedule_periods, periods, present_value, future_value, begin)

    # principal[0] = 0.0, so ending_balance[0] = present_value
    ending_balance = np.cumsum(np.concatenate([[float(present_value)], principal[1:]]))
    beginning_balance = np.concatenate([[float(present_value)], ending_balance[:-1]])

    return AmortizationSchedule(
        period=period,
        payment=payment,
        interest=interest,
        principal=principal,
        beginning_balance=beginning_balance,
        ending_balance=ending_balance,
    )


def compare_arrays(expected: np.ndarray, actual: np.ndarray,
                   rtol: float = 1e-9, atol: float = 1e-10) -> tuple[bool, float, int]:
    """Compare two arrays; returns (all_close, max_rel_diff, worst_index)."""
    min_len = min(len(expected), len(actual))
    exp = np.asarray(expected[:min_len], dtype=float)
    act = np.asarray(actual[:min_len], dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        rel_diff = np.abs(exp - act) / np.maximum(np.abs(exp), atol)
        rel_diff = np.where(np.isfinite(rel_diff), rel_diff, 0.0)
    max_rel_diff = float(np.max(rel_diff)) if min_len else 0.0
    worst_index = int(np.argmax(rel_diff)) if min_len else 0
    all_close = bool(np.allclose(exp, act, rtol=rtol, atol=atol))
    return all_close, max_rel_diff, worst_index


# =============================================================================
# Annuity Object
# =============================================================================
#
# Annuity holds one set of level-payment terms and answers the per-period
# questions (payment, interest, principal) by calling the scalar formulas.
# =============================================================================

@dataclass
class Annuity:
    """
    Terms of a level-payment annuity or loan.

    Fields:
        rate: Interest rate per period as decimal
        periods: Number of payment periods (positive integer)
        present_value: Cash flow at time zero, sign per the cash-flow
            convention (+ for a loan received, − for a deposit made)
        future_value: Balance left after the last payment (default 0.0)
        when: 0 / "end" or 1 / "begin" (default 0)
    """
    rate: float
    periods: int
    present_value: float
    future_value: float = 0.0
    when: int | str = 0

    def __post_init__(self) -> None:
        """Validate terms."""
        _validate_periods(self.periods)
        if self.rate <= -1:
            raise TVMDomainError(f"rate must be greater than -1, got {self.rate}")
        # Raises ValueError for an unknown timing name
        _convert_when(self.when)

    @property
    def is_annuity_due(self) -> bool:
        """True if payments fall at the start of each period."""
        return _convert_when(self.when) == 1

    def payment(self) -> float:
        """Level payment per period."""
        return pmt(self.rate, self.periods, self.present_value, self.future_value, self.when)

    def interest(self, period: int) -> float:
        """Interest portion of the payment in period (1-based)."""
        return ipmt(self.rate, period, self.periods, self.present_value,
                    self.future_value, self.when)

    def principal(self, period: int) -> float:
        """Principal portion of the payment in period (1-based)."""
        return ppmt(self.rate, period, self.periods, self.present_value,
                    self.future_value, self.when)

    def total_interest(self) -> float:
        """Sum of the interest portions over the whole schedule."""
        periods = np.arange(1, self.periods + 1)
        return float(np.sum(ipmt_vector(self.rate, periods, self.periods, self.present_value,
                                        self.future_value, self.when)))


def schedule_from_annuity(annuity: Annuity) -> AmortizationSchedule:
    """
    Generate the amortization schedule for an Annuity.

    Args:
        annuity: Annuity terms

    Returns:
        AmortizationSchedule with annuity.periods + 1 rows
    """
    return run_amortization_schedule(
        rate=annuity.rate,
        periods=annuity.periods,
        present_value=annuity.present_value,
        future_value=annuity.future_value,
        when=annuity.when,
    )
