# Middleware package init
"""
Notes API — Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and error bodies
    2. Logging: method, path, status and duration, tagged with the request ID
    3. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)

    Responses pass back through the same chain in reverse, so the logger
    sees the final status and the request ID lands in the response headers.
"""
