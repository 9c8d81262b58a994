"""Kintai System package.

This package is organized by feature modules (attendance, payroll, users, ...)
with a thin Flask controller layer and service/repository layers. The
time-accounting engine (classification, payroll periods, monthly aggregation)
is pure and lives under ``attendance.classification`` and ``payroll``.
"""
