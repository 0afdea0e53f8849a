# Middleware package init
"""
CatVote: Middleware Package
===========================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID first: every later log line can carry the correlation ID
    2. Logging: measures the full handling time and records the status
    3. CORS: FastAPI's CORSMiddleware (answers preflight requests)
"""
