"""
Backend SafeSpace — scan API for the SafeSpace teen-safety app.

Evaluates submitted URLs and messages for risk, stores each verdict per user,
and serves paginated scan history. Modular layout with clear separation
between analytics (evaluators), database (scan record store), scanner
(service layer) and API server.
"""

__version__ = "0.1.0"
