"""Notifications app package.

Emails guests and hosts about booking lifecycle events. Domain events are
picked up after commit and turned into Celery tasks, so a slow or failing
mail server never holds up or rolls back a booking.
"""
