"""Use-case layer: collectors, status aggregation and the refresh cycle.

Use cases depend only on domain ports; adapters are injected by
``kcard.app.main``.
"""
