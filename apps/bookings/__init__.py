"""Bookings app package.

This app encapsulates the booking lifecycle: server-side pricing and
commission split at creation, the client and agent booking views and the
admin booking console.
"""
