"""Analytics app package.

Read-only reporting: top agents, public platform statistics and the admin
dashboard overview.
"""
