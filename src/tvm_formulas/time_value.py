# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import warnings
import numpy as np

__version__ = "0.1.0"


# =============================================================================
# SIGN CONVENTION
# =============================================================================
#
# Every function in this module follows the cash-flow sign convention used by
# spreadsheet TVM functions: money paid out is negative, money received is
# positive. For a consistent set of values the five quantities satisfy
#
#     pv·(1+r)^n + pmt·(1+r·w)·((1+r)^n − 1)/r + fv = 0
#
# where w = 1 for payments at the start of each period (annuity due) and
# w = 0 for payments at the end (ordinary annuity). Each function solves this
# identity for one unknown, so the value it returns is the cash flow that
# balances the others. A $10,000 loan received today (pv = +10000) is repaid
# by negative payments.
#
# FUNCTION ARCHITECTURE:
#
#   fv, pv, pmt         closed forms, independent of each other
#   ipmt                pmt for the level payment, fv for the balance
#   ppmt                pmt - ipmt
#   *_vector            the same formulas over numpy arrays (broadcasting)
# =============================================================================

BEGIN_NAMES: tuple[str, ...] = ("begin", "start")
END_NAMES: tuple[str, ...] = ("end", "finish")

# _timing_flag() result for a number that is neither 0 nor 1
_OTHER_TIMING: int = -1


class TVMDomainError(ValueError):
    """Raised when a formula has no real, finite value for the given inputs."""


def _timing_flag(when: int | str | None) -> int:
    """1 for start of period, 0 for end, _OTHER_TIMING for any other number."""
    if when is None:
        return 0
    if isinstance(when, str):
        key = when.strip().lower()
        if key in BEGIN_NAMES:
            return 1
        if key in END_NAMES:
            return 0
        raise ValueError(
            f"when must be 0, 1 or one of {BEGIN_NAMES + END_NAMES}, got {when!r}"
        )
    if when == 1:
        return 1
    if when == 0:
        return 0
    return _OTHER_TIMING


def _warn_other_timing(when) -> None:
    # Called from a timing converter; stacklevel reaches the public function's caller
    warnings.warn(
        f"payment timing {when!r} is neither 0 nor 1, treating as end of period",
        UserWarning,
        stacklevel=4,
    )


def _convert_when(when: int | str | None) -> int:
    """
    Normalise a payment timing flag to 1 (start of period) or 0 (end of period).

    Accepts 0/1 or one of the names in BEGIN_NAMES / END_NAMES. Any other
    number is treated as end of period with a warning. An unknown name raises.
    """
    flag = _timing_flag(when)
    if flag == _OTHER_TIMING:
        _warn_other_timing(when)
        return 0
    return flag


def _check_growth(rate) -> None:
    if np.any(np.asarray(rate) <= -1):
        raise TVMDomainError(f"rate must be greater than -1, got {rate}")


def _compound(rate, periods):
    """
    Growth over the schedule: returns ((1+r)^n, (1+r)^n - 1).

    Both come from n·log1p(r), and the second through expm1, so (1+r)^n - 1
    keeps its precision when r is so small that (1+r)^n rounds to 1. Works
    element-wise on arrays; zero-rate elements are left to the caller's
    linear branch and are not checked.

    Raises:
        TVMDomainError: If rate <= -1, if (1+r)^n overflows or underflows to
            zero, or if n·log1p(r) underflows to zero for a non-zero rate
            and non-zero n
    """
    _check_growth(rate)
    with np.errstate(over='ignore', under='ignore', invalid='ignore'):
        log_growth = np.multiply(periods, np.log1p(rate))
        term = np.exp(log_growth)
        growth = np.expm1(log_growth)
    compounding = np.not_equal(rate, 0.0)
    if np.any(compounding & ~(np.isfinite(term) & (term > 0.0))):
        raise TVMDomainError(
            f"(1 + rate) ** periods is out of floating-point range for rate={rate}, periods={periods}"
        )
    if np.any(compounding & (growth == 0.0) & np.not_equal(periods, 0)):
        raise TVMDomainError(
            f"rate={rate} is too small to compound over periods={periods}"
        )
    if np.ndim(term) == 0:
        return float(term), float(growth)
    return term, growth


def _check_finite(value, name: str):
    if not np.all(np.isfinite(value)):
        raise TVMDomainError(f"{name} has no finite value for the given inputs")
    return value


def _warn_period_outside(period, periods) -> None:
    # Called directly from a public function
    if np.any((np.asarray(period) < 1) | (np.asarray(period) > np.asarray(periods))):
        warnings.warn(
            f"period {period} is outside the schedule [1, {periods}]",
            UserWarning,
            stacklevel=3,
        )


# =============================================================================
# SCALAR FORMULAS
# =============================================================================

def fv(
        rate: float,
        periods: float,
        payment: float | None = None,
        present_value: float | None = None,
        when: int | str | None = None
) -> float:
    """
    Future value of a present sum plus a level payment stream.

    Formula:
        FV = -[PV × (1+r)^n + PMT × (1 + r·w) × ((1+r)^n − 1) / r]

    With r = 0 there is nothing to compound and the value is the plain sum:

        FV = -(PV + PMT × n)

    The factor (1 + r·w) credits each payment with one extra period of
    interest when payments fall at the start of the period.

    Args:
        rate: Interest rate per period as decimal (e.g. 0.005 for 0.5%)
        periods: Number of compounding periods (n)
        payment: Cash flow per period (default: 0)
        present_value: Cash flow at time zero (default: 0)
        when: 0 or "end" for end-of-period payments, 1 or "begin" for
            start-of-period payments (default: 0)

    Returns:
        The cash flow at the end of period n that balances the schedule

    Raises:
        TVMDomainError: If rate <= -1, or if (1+r)^n or the result is out of
            floating-point range
        ValueError: If when is an unknown timing name

    Example:
        Deposit $2,000 now and $200 at the end of every month for 10 years
        at 6% a year compounded monthly:

        >>> round(fv(0.06/12, 10*12, -200, -2000), 2)
        36414.66
    """
    # Apply defaults for optional parameters
    if payment is None:
        payment = 0.0
    if present_value is None:
        present_value = 0.0
    begin = _convert_when(when)

    if rate == 0:
        value = -(present_value + payment * periods)
    else:
        term, growth = _compound(rate, periods)
        value = -(present_value * term + payment * (1 + rate * begin) * growth / rate)
    return _check_finite(value, "fv")


def pv(
        rate: float,
        periods: float,
        payment: float,
        future_value: float | None = None,
        when: int | str | None = None
) -> float:
    """
    Present value of a level payment stream plus a terminal sum.

    This is the FV identity solved for PV:

        PV = -[PMT × (1 + r·w) × ((1+r)^n − 1) / r + FV] / (1+r)^n

    and, with r = 0:

        PV = -PMT × n − FV

    Round trip: pv(r, n, p, fv(r, n, p, pv0, w), w) returns pv0.

    Args:
        rate: Interest rate per period as decimal
        periods: Number of payment periods (n)
        payment: Cash flow per period
        future_value: Cash flow at the end of period n (default: 0)
        when: Payment timing, see fv() (default: 0)

    Returns:
        The cash flow at time zero that balances the schedule

    Raises:
        TVMDomainError: If rate <= -1, or if (1+r)^n or the result is out of
            floating-point range
        ValueError: If when is an unknown timing name

    Example:
        >>> round(pv(0.08/12, 12, -100), 2)
        1149.58
    """
    if future_value is None:
        future_value = 0.0
    begin = _convert_when(when)

    if rate == 0:
        value = -payment * periods - future_value
    else:
        term, growth = _compound(rate, periods)
        value = -(payment * (1 + rate * begin) * growth / rate + future_value) / term
    return _check_finite(value, "pv")


def pmt(
        rate: float,
        periods: float,
        present_value: float,
        future_value: float | None = None,
        when: int | str | None = None
) -> float:
    """
    Level payment that carries present_value to future_value over n periods.

    End-of-period payments (ordinary annuity):

        PMT = -[FV × r / ((1+r)^n − 1) + PV × r / (1 − (1+r)^-n)]

    The second term is the annuity factor AF(n) = r / (1 − (1+r)^-n) applied
    to the present value; the first is the sinking-fund factor applied to the
    future value. Start-of-period payments earn one more period of interest,
    so the same schedule needs PMT / (1 + r).

    With r = 0 the balance is spread evenly:

        PMT = -(PV + FV) / n

    Args:
        rate: Interest rate per period as decimal
        periods: Number of payment periods (n)
        present_value: Cash flow at time zero (e.g. loan principal)
        future_value: Balance left after the last payment (default: 0)
        when: Payment timing, see fv() (default: 0)

    Returns:
        The payment per period

    Raises:
        TVMDomainError: If periods is zero
        TVMDomainError: If rate <= -1
        TVMDomainError: If (1+r)^n or the result is out of floating-point range
        ValueError: If when is an unknown timing name

    Example:
        A $10,000 loan at 1% a month over 36 months:

        >>> round(pmt(0.01, 36, 10000), 4)
        -332.1431
    """
    if future_value is None:
        future_value = 0.0
    begin = _convert_when(when)

    if periods == 0:
        raise TVMDomainError("periods must be non-zero to spread a payment")
    if rate == 0:
        payment = -(present_value + future_value) / periods
    else:
        term, growth = _compound(rate, periods)
        # PV·r/(1 - (1+r)^-n) == PV·r·(1+r)^n / ((1+r)^n - 1)
        payment = -(future_value + present_value * term) * rate / growth
        if begin:
            payment = payment / (1 + rate)
    return _check_finite(payment, "pmt")


def ipmt(
        rate: float,
        period: float,
        periods: float,
        present_value: float,
        future_value: float | None = None,
        when: int | str | None = None
) -> float:
    """
    Interest portion of the level payment in a given period.

    The interest paid in a period is the rate times the balance that accrued
    interest during it. That balance is never simulated step by step: it is
    the future value, after the payments made so far, of the opening
    balance, which fv() gives in closed form.

    Interest base by case (PMT from pmt()):

        period == 1, end of period:    -PV
        period == 1, start of period:  0  (first payment is made at time zero)
        period > 1,  end of period:    FV(r, period-1, PMT, PV, 0)
        period > 1,  start of period:  FV(r, period-2, PMT, PV, 1) − PMT

    Result = interest base × r.

    Args:
        rate: Interest rate per period as decimal
        period: 1-based period index, expected in [1, periods]
        periods: Number of payment periods (n)
        present_value: Cash flow at time zero
        future_value: Balance left after the last payment (default: 0)
        when: Payment timing, see fv() (default: 0)

    Returns:
        Interest portion of the payment for the period

    Raises:
        TVMDomainError: Propagated from pmt() / fv()
        ValueError: If when is an unknown timing name

    Warns:
        UserWarning: If period is outside [1, periods]. The value is still
            returned.

    Example:
        >>> round(ipmt(0.1, 3, 3, 8000), 2)
        -292.45
    """
    if future_value is None:
        future_value = 0.0
    begin = _convert_when(when)
    _warn_period_outside(period, periods)
    return _interest(rate, period, periods, present_value, future_value, begin)


def _interest(rate, period, periods, present_value, future_value, begin):
    payment = pmt(rate, periods, present_value, future_value, begin)
    if period == 1:
        interest_base = 0.0 if begin else -present_value
    elif begin:
        interest_base = fv(rate, period - 2, payment, present_value, 1) - payment
    else:
        interest_base = fv(rate, period - 1, payment, present_value, 0)
    return interest_base * rate


def ppmt(
        rate: float,
        period: float,
        periods: float,
        present_value: float,
        future_value: float | None = None,
        when: int | str | None = None
) -> float:
    """
    Principal portion of the level payment in a given period.

    PPMT = PMT − IPMT, so ppmt + ipmt == pmt for every period. Summed over
    periods 1..n the principal portions pay down the whole present value
    less the target future value.

    Args:
        rate: Interest rate per period as decimal
        period: 1-based period index, expected in [1, periods]
        periods: Number of payment periods (n)
        present_value: Cash flow at time zero
        future_value: Balance left after the last payment (default: 0)
        when: Payment timing, see fv() (default: 0)

    Returns:
        Principal portion of the payment for the period

    Warns:
        UserWarning: If period is outside [1, periods], as for ipmt()

    Example:
        >>> round(ppmt(0.08, 10, 10, 200000), 2)
        -27598.05
    """
    if future_value is None:
        future_value = 0.0
    begin = _convert_when(when)
    _warn_period_outside(period, periods)
    return (pmt(rate, periods, present_value, future_value, begin)
            - _interest(rate, period, periods, present_value, future_value, begin))


# =============================================================================
# VECTOR FORMULAS
# =============================================================================
#
# Same formulas over numpy arrays. Arguments are broadcast against each other
# (numpy.broadcast_arrays), so a scalar rate and an array of periods give one
# result per period. Zero-rate elements take the linear branch through
# np.where; the compounding branch is still evaluated for them, so its 0/0 is
# silenced with np.errstate and then discarded. Growth and the domain checks
# go through the same _compound() and _check_finite() as the scalar formulas.
# =============================================================================

def _convert_when_vector(when) -> np.ndarray:
    if when is None:
        return np.zeros((), dtype=int)
    flags = np.asarray(when, dtype=object)
    converted = np.vectorize(_timing_flag, otypes=[int])(flags)
    other = converted == _OTHER_TIMING
    if np.any(other):
        _warn_other_timing(flags[other].tolist() if flags.ndim else when)
    return np.where(other, 0, converted)


def fv_vector(
        rate,
        periods,
        payment=None,
        present_value=None,
        when=None
) -> np.ndarray:
    """
    Element-wise fv() over broadcast arrays.

    Example:
        >>> np.round(fv_vector(0.01, [12, 24], -100), 2)
        array([1268.25, 2697.35])
    """
    if payment is None:
        payment = 0.0
    if present_value is None:
        present_value = 0.0
    rate, periods, payment, present_value, begin = np.broadcast_arrays(
        np.asarray(rate, dtype=float),
        np.asarray(periods, dtype=float),
        np.asarray(payment, dtype=float),
        np.asarray(present_value, dtype=float),
        _convert_when_vector(when),
    )
    term, growth = _compound(rate, periods)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        compounded = -(present_value * term + payment * (1.0 + rate * begin) * growth / rate)
        value = np.where(rate == 0.0, -(present_value + payment * periods), compounded)
    return _check_finite(value, "fv")


def pv_vector(
        rate,
        periods,
        payment,
        future_value=None,
        when=None
) -> np.ndarray:
    """Element-wise pv() over broadcast arrays."""
    if future_value is None:
        future_value = 0.0
    rate, periods, payment, future_value, begin = np.broadcast_arrays(
        np.asarray(rate, dtype=float),
        np.asarray(periods, dtype=float),
        np.asarray(payment, dtype=float),
        np.asarray(future_value, dtype=float),
        _convert_when_vector(when),
    )
    term, growth = _compound(rate, periods)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        discounted = -(payment * (1.0 + rate * begin) * growth / rate + future_value) / term
        value = np.where(rate == 0.0, -payment * periods - future_value, discounted)
    return _check_finite(value, "pv")


def pmt_vector(
        rate,
        periods,
        present_value,
        future_value=None,
        when=None
) -> np.ndarray:
    """
    Element-wise pmt() over broadcast arrays.

    Raises:
        TVMDomainError: If any element has periods == 0 or rate <= -1, or if
            (1+r)^n or the result of any element is out of floating-point range
    """
    if future_value is None:
        future_value = 0.0
    rate, periods, present_value, future_value, begin = np.broadcast_arrays(
        np.asarray(rate, dtype=float),
        np.asarray(periods, dtype=float),
        np.asarray(present_value, dtype=float),
        np.asarray(future_value, dtype=float),
        _convert_when_vector(when),
    )
    if np.any(periods == 0):
        raise TVMDomainError("periods must be non-zero to spread a payment")
    term, growth = _compound(rate, periods)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        level = -(future_value + present_value * term) * rate / growth / (1.0 + rate * begin)
        value = np.where(rate == 0.0, -(present_value + future_value) / periods, level)
    return _check_finite(value, "pmt")


def _interest_vector(rate, period, periods, present_value, future_value, begin):
    rate, period, periods, present_value, future_value, begin = np.broadcast_arrays(
        np.asarray(rate, dtype=float),
        np.asarray(period, dtype=float),
        np.asarray(periods, dtype=float),
        np.asarray(present_value, dtype=float),
        np.asarray(future_value, dtype=float),
        begin,
    )
    payment = pmt_vector(rate, periods, present_value, future_value, begin)
    end_base = fv_vector(rate, period - 1, payment, present_value, 0)
    begin_base = fv_vector(rate, period - 2, payment, present_value, 1) - payment
    interest_base = np.where(begin == 1, begin_base, end_base)
    first_base = np.where(begin == 1, 0.0, -present_value)
    return np.where(period == 1, first_base, interest_base) * rate


def ipmt_vector(
        rate,
        period,
        periods,
        present_value,
        future_value=None,
        when=None
) -> np.ndarray:
    """
    Element-wise ipmt() over broadcast arrays.

    Passing period=np.arange(1, n + 1) gives the interest column of a whole
    amortization schedule in one call.

    Example:
        >>> np.round(ipmt_vector(0.1, [1, 2, 3], 3, 8000), 2)
        array([-800.  , -558.31, -292.45])
    """
    if future_value is None:
        future_value = 0.0
    begin = _convert_when_vector(when)
    _warn_period_outside(period, periods)
    return _interest_vector(rate, period, periods, present_value, future_value, begin)


def ppmt_vector(
        rate,
        period,
        periods,
        present_value,
        future_value=None,
        when=None
) -> np.ndarray:
    """Element-wise ppmt() over broadcast arrays."""
    if future_value is None:
        future_value = 0.0
    begin = _convert_when_vector(when)
    _warn_period_outside(period, periods)
    return (pmt_vector(rate, periods, present_value, future_value, begin)
            - _interest_vector(rate, period, periods, present_value, future_value, begin))
