# Middleware package init
"""
Course Catalog Backend — Middleware Package
============================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: reject abusive clients before any other work
    2. Request ID: correlation ID for logs and error bodies
    3. Logging: one access line with status and duration
"""
