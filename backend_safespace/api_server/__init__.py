"""
API server package — HTTP/REST interface.

Exposes URL and message scans, scan history and dashboard scan stats.
Handles bearer-token authentication and delegates to the scanner service.
"""
