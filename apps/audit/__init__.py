"""Audit app package.

Append-only record of administrative mutations. Application code writes
rows through ``record_audit``; there is no read API.
"""
