"""Properties app package.

Holds the property record together with everything the pricing engine
reads: the weekly price grid, per-date overrides and the nightly
availability calendar. ``apps.properties.pricing`` resolves prices.
"""
