# Routes package init
"""
Tabrik Backend — API Routes Package
=====================================

Route Inventory:
    - orders.py:    GET/POST /api/orders, DELETE /api/orders/{id}
    - media.py:     GET/POST /api/media, PUT/DELETE /api/media/{id}
    - health.py:    GET /health
    - frontend.py:  GET /  (index.html; other assets are mounted in main.py)

Routes handle HTTP concerns only and delegate to the services.
"""
