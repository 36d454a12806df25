"""Browser-facing JSON API for py-pager.

This package provides a Flask application that runs simulations over
HTTP.  It is an **optional** extra — install with::

    pip install py-pager[web]

The ``create_app`` factory in ``app.py`` serves two endpoints:

- ``GET /api/policies`` — the policies in run order.
- ``POST /api/simulate`` — replay a trace and return per-policy results.
"""
