"""
Tabrik Backend — Order Route Handlers
=======================================

What:  GET/POST /api/orders and DELETE /api/orders/{order_id}.
How:   Routes stay thin: take the connector from the dependency, call
       OrderService, wrap the result in the response envelope.
Who:   Called by the order form and the admin page of the frontend.
"""

from typing import List

from fastapi import APIRouter, Depends, Request

from tabrik.database import MongoConnector, get_connector
from tabrik.schemas.documents import OrderDocument, OrderFields
from tabrik.schemas.responses import ErrorResponse, MessageResponse, OrderSavedResponse
from tabrik.services.order_service import order_service

router = APIRouter(prefix="/api", tags=["Orders"])


@router.get(
    "/orders",
    response_model=List[OrderDocument],
    response_model_exclude_unset=True,
    summary="List orders, newest first",
    description="Returns every order. Empty when the server runs without a database.",
)
async def list_orders(
    connector: MongoConnector = Depends(get_connector),
) -> List[OrderDocument]:
    return await order_service.list_documents(connector)


@router.post(
    "/orders",
    response_model=OrderSavedResponse,
    response_model_exclude_unset=True,
    responses={500: {"description": "Insert failed", "model": ErrorResponse}},
    summary="Submit an order",
    description=(
        "Stores the order and returns it with its id and createdAt. Without a "
        "database the order is only logged and the request body echoed back."
    ),
)
async def create_order(
    payload: OrderFields,
    request: Request,
    connector: MongoConnector = Depends(get_connector),
) -> OrderSavedResponse:
    body = await request.json()
    order, stored = await order_service.create_document(connector, payload, body)
    message = order_service.created_message if stored else order_service.offline_created_message
    return OrderSavedResponse(message=message, order=order)


@router.delete(
    "/orders/{order_id}",
    response_model=MessageResponse,
    responses={
        500: {"description": "Malformed id or database unavailable", "model": ErrorResponse},
    },
    summary="Delete an order",
)
async def delete_order(
    order_id: str,
    connector: MongoConnector = Depends(get_connector),
) -> MessageResponse:
    """Deleting an id that does not exist still reports success."""
    await order_service.delete_document(connector, order_id)
    return MessageResponse(message=order_service.deleted_message)
