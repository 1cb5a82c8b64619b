"""Reservations app package.

This app is the authoritative store of committed stays. Any reservation
that is not cancelled blocks its pod for its date range, and the store
re-validates overlap atomically at insert time, which makes it the single
authority on exclusivity that room holds rely on.
"""
