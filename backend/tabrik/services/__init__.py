# Services package init
"""
Tabrik Backend — Services Layer
=================================

Service Inventory:
    - DocumentService (base): list/create/delete for one collection and the
      degraded-mode guard (`fallback_when_disconnected`)
    - OrderService: orders collection
    - MediaService: media collection, adds partial update

Services receive the MongoConnector on every call and keep no state of
their own, so the module-level singletons are shared by all requests.
"""
