"""Payroll record-keeping engine.

Computes gross/net salary from raw payroll inputs, keeps pay periods of an
employee from overlapping, governs payment status and produces summary and
department budget reports over the record store.
"""

__version__ = "1.0.0"
