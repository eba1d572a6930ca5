# Requires Python 3.12+
"""
TVM Standard Formulas: future value, present value, payment and the
interest/principal split of a level payment.

All functions follow the cash-flow sign convention: money paid out is
negative, money received is positive.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Time value of money (scalar and vector)
from tvm_formulas.time_value import (
    TVMDomainError,
    BEGIN_NAMES,
    END_NAMES,
    fv,
    pv,
    pmt,
    ipmt,
    ppmt,
    fv_vector,
    pv_vector,
    pmt_vector,
    ipmt_vector,
    ppmt_vector,
)

# Amortization schedules
from tvm_formulas.amortization import (
    AmortizationSchedule,
    Annuity,
    run_amortization_schedule,
    schedule_from_annuity,
    compare_arrays,
)

# Spreadsheet spellings
FV = fv
PV = pv
PMT = pmt
IPMT = ipmt
PPMT = ppmt

__all__ = [
    "__version__",
    # Time value of money
    "TVMDomainError",
    "BEGIN_NAMES",
    "END_NAMES",
    "fv",
    "pv",
    "pmt",
    "ipmt",
    "ppmt",
    "fv_vector",
    "pv_vector",
    "pmt_vector",
    "ipmt_vector",
    "ppmt_vector",
    # Amortization
    "AmortizationSchedule",
    "Annuity",
    "run_amortization_schedule",
    "schedule_from_annuity",
    "compare_arrays",
    # Spreadsheet spellings
    "FV",
    "PV",
    "PMT",
    "IPMT",
    "PPMT",
]
