"""
Tabrik Backend — Application Package
======================================

Layered the usual way:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← degraded-mode guard, CRUD
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic documents & envelopes
    ├─────────────────────────────────────┤
    │      Database (MongoConnector)      │  ← async pymongo client
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
