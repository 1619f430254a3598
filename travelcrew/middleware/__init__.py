"""
Travel Crew Backend — Middleware Package
==========================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first so every later log line can carry it
    - Logging measures the full handler duration, including asset uploads
"""
