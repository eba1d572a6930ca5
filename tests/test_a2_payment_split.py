"""
Unit tests for the interest/principal split of a level payment (IPMT, PPMT).

Verifies the decomposition identity, amortization closure, the first-period
rule for annuities due and the closed-form balance used by ipmt().

Version: 0.1.0
Last Updated: 2026-10-19
Status: Active

================================================================================
NOTATION
================================================================================

    k = period index, 1-based (1..n)
    B(k) = balance outstanding after k payments, sign of present_value

    End of period (ordinary annuity):
        IPMT(k) = -B(k-1) × r
        B(k) = -FV(r, k, PMT, PV, 0)
        Σ PPMT(k) = -(PV + FV)

    Start of period (annuity due):
        IPMT(1) = 0
        Σ PPMT(k) = -(PV + FV / (1 + r))
        (interest for the last period accrues after the last payment)

================================================================================
"""

import unittest
import warnings

from tvm_formulas import IPMT, PPMT
from tvm_formulas.time_value import (
    fv,
    pmt,
    ipmt,
    ppmt,
)

from tests.utilities import (
    SampleAnnuity,
    generate_random_annuities,
    relative_delta,
)

# Module-level shared data (populated by setUpModule)
TEST_ANNUITIES: list[SampleAnnuity] = []


# =============================================================================
# Module Setup/Teardown
# =============================================================================

def setUpModule():
    """Generate annuities; long terms are capped to keep the period loops short."""
    TEST_ANNUITIES[:] = [a for a in generate_random_annuities(count=150, seed=7) if a.periods <= 120]
    if not TEST_ANNUITIES:
        raise RuntimeError("setUpModule failed: No test annuities were created")


def tearDownModule():
    """Clean up module-level data."""
    TEST_ANNUITIES.clear()


def expected_principal_total(a: SampleAnnuity) -> float:
    if a.when == 1:
        return -(a.present_value + a.future_value / (1 + a.rate))
    return -(a.present_value + a.future_value)


# =============================================================================
# Test Classes
# =============================================================================

class TestDecomposition(unittest.TestCase):
    """ppmt + ipmt == pmt for every period."""

    def test_principal_plus_interest_equals_payment(self):
        for a in TEST_ANNUITIES:
            payment = pmt(a.rate, a.periods, a.present_value, a.future_value, a.when)
            for k in range(1, a.periods + 1):
                with self.subTest(annuity_id=a.annuity_id, period=k, when=a.when):
                    interest = ipmt(a.rate, k, a.periods, a.present_value, a.future_value, a.when)
                    principal = ppmt(a.rate, k, a.periods, a.present_value, a.future_value, a.when)
                    self.assertAlmostEqual(principal + interest, payment,
                                           delta=relative_delta(payment))

    def test_spreadsheet_aliases(self):
        self.assertIs(IPMT, ipmt)
        self.assertIs(PPMT, ppmt)


class TestAmortizationClosure(unittest.TestCase):
    """Principal portions sum to the balance paid down."""

    def test_sum_of_principal(self):
        for a in TEST_ANNUITIES:
            with self.subTest(annuity_id=a.annuity_id, periods=a.periods, when=a.when):
                total = sum(ppmt(a.rate, k, a.periods, a.present_value, a.future_value, a.when)
                            for k in range(1, a.periods + 1))
                self.assertAlmostEqual(
                    total, expected_principal_total(a),
                    delta=relative_delta(a.present_value, a.future_value) * a.periods,
                )

    def test_interest_is_payments_less_principal(self):
        for a in TEST_ANNUITIES:
            with self.subTest(annuity_id=a.annuity_id, when=a.when):
                payment = pmt(a.rate, a.periods, a.present_value, a.future_value, a.when)
                total_interest = sum(ipmt(a.rate, k, a.periods, a.present_value, a.future_value, a.when)
                                     for k in range(1, a.periods + 1))
                self.assertAlmostEqual(
                    total_interest, payment * a.periods - expected_principal_total(a),
                    delta=relative_delta(a.present_value, a.future_value, payment) * a.periods,
                )

    def test_loan_paid_off_by_reference_schedule(self):
        """$2,500 at 8.24% a year over 12 months."""
        rate = 0.0824 / 12
        balance = 2500.0
        for k in range(1, 13):
            balance += ppmt(rate, k, 12, 2500)
        self.assertAlmostEqual(balance, 0.0, places=8)
        total_interest = sum(ipmt(rate, k, 12, 2500) for k in range(1, 13))
        self.assertAlmostEqual(total_interest, -112.98, delta=0.01)


class TestFirstPeriod(unittest.TestCase):
    """Period 1 rules."""

    def test_annuity_due_first_interest_is_zero(self):
        for a in TEST_ANNUITIES:
            with self.subTest(annuity_id=a.annuity_id):
                self.assertEqual(ipmt(a.rate, 1, a.periods, a.present_value, a.future_value, 1), 0.0)

    def test_annuity_due_first_payment_is_all_principal(self):
        for a in TEST_ANNUITIES:
            with self.subTest(annuity_id=a.annuity_id):
                payment = pmt(a.rate, a.periods, a.present_value, a.future_value, 1)
                self.assertEqual(ppmt(a.rate, 1, a.periods, a.present_value, a.future_value, 1), payment)

    def test_ordinary_first_interest_on_present_value(self):
        for a in TEST_ANNUITIES:
            with self.subTest(annuity_id=a.annuity_id):
                self.assertEqual(ipmt(a.rate, 1, a.periods, a.present_value, a.future_value, 0),
                                 -a.present_value * a.rate)


class TestClosedFormBalance(unittest.TestCase):
    """ipmt() takes the balance from fv() rather than stepping through periods."""

    def test_matches_step_by_step_balance(self):
        for a in TEST_ANNUITIES[:40]:
            payment = pmt(a.rate, a.periods, a.present_value, a.future_value, a.when)
            # B(k-1): balance after the previous payment
            balance = a.present_value
            for k in range(1, a.periods + 1):
                with self.subTest(annuity_id=a.annuity_id, period=k, when=a.when):
                    if a.when == 1 and k == 1:
                        expected_interest = 0.0
                    else:
                        expected_interest = -balance * a.rate
                    interest = ipmt(a.rate, k, a.periods, a.present_value, a.future_value, a.when)
                    self.assertAlmostEqual(interest, expected_interest,
                                           delta=relative_delta(a.present_value, payment) * k)
                balance += payment - expected_interest

    def test_ordinary_balance_is_negated_future_value(self):
        for a in TEST_ANNUITIES[:40]:
            if a.when != 0:
                continue
            payment = pmt(a.rate, a.periods, a.present_value, a.future_value, 0)
            for k in range(2, a.periods + 1):
                with self.subTest(annuity_id=a.annuity_id, period=k):
                    balance = -fv(a.rate, k - 1, payment, a.present_value, 0)
                    self.assertEqual(ipmt(a.rate, k, a.periods, a.present_value, a.future_value, 0),
                                     -balance * a.rate)


class TestZeroRate(unittest.TestCase):

    def test_no_interest_at_zero_rate(self):
        for when in (0, 1):
            for k in range(1, 11):
                with self.subTest(when=when, period=k):
                    self.assertEqual(ipmt(0.0, k, 10, 1000, 0, when), 0.0)
                    self.assertEqual(ppmt(0.0, k, 10, 1000, 0, when), -100.0)


class TestPeriodOutsideSchedule(unittest.TestCase):
    """Out-of-range periods are computed and flagged with a warning."""

    def test_period_zero_warns(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = ipmt(0.01, 0, 12, 1000)
        self.assertIsInstance(result, float)
        self.assertTrue(any(issubclass(w.category, UserWarning) for w in caught))

    def test_period_past_end_warns(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            ppmt(0.01, 13, 12, 1000)
        self.assertTrue(any("outside the schedule" in str(w.message) for w in caught))

    def test_period_in_range_does_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            ipmt(0.01, 12, 12, 1000)
            ppmt(0.01, 1, 12, 1000)


if __name__ == '__main__':
    unittest.main(verbosity=2)
