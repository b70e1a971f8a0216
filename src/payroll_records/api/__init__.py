"""HTTP API for the payroll records engine."""
