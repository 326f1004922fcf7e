# Middleware package init
"""
Registros API - Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and the X-Request-ID header
    2. Logging: one access log line per request, with the request ID, the
       record id and, on a storage failure, the failed RecordStore operation
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
