"""
Product command and query handlers.

Bound to the mediator at startup by auto_register_handlers().
"""

import logging
from typing import Optional

from ...shared.cqrs import (
    CommandHandler,
    QueryHandler,
    CreateProductCommand,
    GetProductByIdQuery,
    command_handler,
    query_handler
)
from .models import Product
from .repository import InMemoryProductStore

logger = logging.getLogger(__name__)


@command_handler(CreateProductCommand)
class CreateProductHandler(CommandHandler[CreateProductCommand, int]):
    """Creates a product. Runs only after the command passed validation."""

    def __init__(self, store: InMemoryProductStore):
        self.store = store

    async def handle(self, command: CreateProductCommand) -> int:
        product = self.store.add(name=command.name, price=command.price)
        logger.info(f"Created product {product.id} (command {command.command_id})")
        return product.id


@query_handler(GetProductByIdQuery)
class GetProductByIdHandler(QueryHandler[GetProductByIdQuery, Optional[Product]]):
    """Pure read; None when no product has the id."""

    def __init__(self, store: InMemoryProductStore):
        self.store = store

    async def handle(self, query: GetProductByIdQuery) -> Optional[Product]:
        return self.store.get(query.product_id)
