"""Bookings app package.

Holds the booking aggregate and its lifecycle: pricing, refund policy,
availability checks and the commands that move a booking between
states. Every claimed calendar day is stored as a row guarded by a
unique (room, day) constraint so overlapping bookings cannot be
committed even when two requests race.
"""
