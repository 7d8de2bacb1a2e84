# Middleware package init
"""
Tabrik Backend — Middleware Package
=====================================

Middleware Chain:
    Request → [Request context] → [GZip] → [CORS] → Route Handler

    - request_context.py assigns the X-Request-ID and writes the access log
      line (collection touched, MongoDB state, status, duration).
"""
