"""Adapter package for external I/O implementations.

Purpose:
    Concrete implementations of the domain ports: the HTTP client that talks to
    sibling node processes, the asset store, the matplotlib card renderer and
    the in-memory publisher.

Dependencies:
    Individual submodules depend on ``requests``, ``matplotlib`` and ``numpy``.

Call context:
    Imported by ``kcard.app.main`` for runtime wiring and by tests.
"""
