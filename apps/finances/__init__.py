"""Finances app package.

Holds host payouts. Refunds for cancelled reservations are scheduled
here as negative payouts; moving money through a payment gateway is
handled elsewhere.
"""
