"""Bookings app package.

This app encapsulates the booking lifecycle and availability engine:
half-open availability checks per chalet, the Pending -> Confirmed /
Cancelled / AutoCancelled state machine, deposit confirmation with an
audit log, and the sweep that reclaims stale Pending holds. Status
changes are atomic compare-and-set updates on the booking row.
"""
