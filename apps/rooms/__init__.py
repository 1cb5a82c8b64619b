"""Rooms app package.

This app holds the pod inventory: zones, quality tiers, nightly prices and
the administrative status of every pod. Date-based availability is never
stored here; it is derived per query from reservations and holds.
"""
