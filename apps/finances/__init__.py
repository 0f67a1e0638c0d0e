"""Finances app package.

Keeps the host earnings ledger. An earning is written when a booking's
payment is recorded, becomes available for payout after the stay is
completed (or its hold date passes), and shrinks to the retained amount
when a paid booking is cancelled with a partial refund.
"""
