"""Room holds app package.

Holds are short-lived soft-locks a booking session places on a pod while the
guest confirms and pays. They expire on their own, can be extended up to a
hard lifetime cap, and end either released or converted into a reservation.
"""
