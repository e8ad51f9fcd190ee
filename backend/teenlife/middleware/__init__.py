"""
TeenLife Hours Backend — Middleware Package
=============================================

What:  Cross-cutting concerns applied to every request.

Middleware chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    Rate limiting rejects abuse before any work is done. Request ID wraps the
    logging middleware so every access line and error body carries the id.
"""
