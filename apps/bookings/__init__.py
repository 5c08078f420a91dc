"""Bookings app package.

This app owns reservations and everything computed around them: the
booking options offered for a stay, the cancellation preview and the
transactional cancellation that releases dates, schedules the refund
and records the change in the audit trail.
"""
