"""
Tech News Backend — Middleware Package
=======================================

Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [CORS] → Route Handler

    1. Rate limit first: abusive clients are rejected before any work
    2. Request ID: correlation id stored in a ContextVar
    3. Access log: method, path, status and duration, tagged with the request id
    4. CORS: FastAPI's CORSMiddleware (credentials allowed for the session cookie)
"""
