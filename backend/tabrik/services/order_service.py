"""
Tabrik Backend — Order Service
================================

What:  Business logic for the `orders` collection (list, create, delete).
Who:   Called by the /api/orders route handlers.

Orders have no update operation; a submitted order is only ever listed or
deleted by the admin page.
"""

from tabrik.schemas.documents import OrderDocument, OrderFields
from tabrik.services.base import DocumentService


class OrderService(DocumentService):
    """List/create/delete for orders. Degraded-mode creates log the full body."""

    fields_model = OrderFields
    document_model = OrderDocument
    label = "order"

    created_message = "✅ Buyurtma qabul qilindi"
    offline_created_message = "✅ Buyurtma qabul qilindi (test rejimi)"
    deleted_message = "🗑️ Buyurtma o'chirildi"


# ── Singleton Instance ────────────────────────────────────────────────────
order_service = OrderService()
