"""SPBU back-office package.

Feature modules (shifts, attendance, payroll, users) each keep pure domain
logic apart from their MySQL adapters and the thin Flask controller layer.
"""
