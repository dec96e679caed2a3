# Middleware package init
"""
CodigoHub Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: sets the correlation ID before anything logs
    2. Logging:    reads that ID and records status and duration
    3. GZip/CORS:  Starlette's stock middleware

    Responses travel back through the same chain in reverse, so the
    X-Request-ID header is present even on error responses.
"""
