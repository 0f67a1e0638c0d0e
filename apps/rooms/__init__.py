"""Rooms app package.

Rentable spaces (stays, conference rooms, event venues) and the
host-controlled inputs to their availability: blocked days and the
active booking window. Bookings read rooms through the room repository
and never write to them.
"""
