"""Finances app package.

Agent balances, withdrawal requests and commission tiers.
"""
