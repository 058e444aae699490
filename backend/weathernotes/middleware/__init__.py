# Middleware package init
"""
WeatherNotes — Middleware Package
==================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [GZip] → [Session] → Route Handler

    1. Request ID: correlation id for every log line of the request
    2. Access Log: method, path, status, duration (uses the request id)
    3. GZip: compresses larger HTML pages
    4. Session: Starlette's signed-cookie session, read by the auth dependency

Nothing here keeps per-user state between requests; the request id lives in
a ContextVar scoped to the handling task.
"""
