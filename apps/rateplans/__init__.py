"""Rate plans app package.

Rate plans are alternative prices for a property: a modifier applied to
every night, eligibility bounds and a cancellation policy. Pure rules live
in ``modifiers``, ``eligibility`` and ``policies``; ``services`` covers
owner management.
"""
