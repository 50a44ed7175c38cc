"""
Product router implementation.

Translates HTTP requests into commands and queries, sends them through
the mediator and maps the results back to responses.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Path, status

from .schemas import ProductCreate, ProductResponse
from ...shared.cqrs import Mediator, CreateProductCommand, GetProductByIdQuery
from ...shared.exceptions import NotFoundException
from ...shared.responses import ErrorResponse
from ...core.dependencies import get_mediator

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    responses={
        422: {"model": ErrorResponse, "description": "Request body or path does not match the schema"},
        500: {"model": ErrorResponse, "description": "Internal server error"}
    }
)


@router.post(
    "",
    response_model=int,
    status_code=status.HTTP_200_OK,
    summary="Create a product",
    description="""
    Creates a product and returns its id.

    **Rules:**
    - `name` must not be empty and may be at most 100 characters long
    - `price` must be greater than 0

    A rule violation answers 400 and names every failing field.
    """,
    responses={400: {"model": ErrorResponse, "description": "Validation rules failed"}}
)
async def create_product(
    payload: ProductCreate,
    mediator: Mediator = Depends(get_mediator)
) -> int:
    """Create a product and return its id"""
    command = CreateProductCommand(name=payload.name, price=Decimal(str(payload.price)))
    return await mediator.send(command)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get a product by id",
    responses={404: {"model": ErrorResponse, "description": "No product with this id"}}
)
async def get_product(
    product_id: int = Path(..., description="Product ID"),
    mediator: Mediator = Depends(get_mediator)
) -> ProductResponse:
    """Fetch one product"""
    product = await mediator.send(GetProductByIdQuery(product_id=product_id))
    if product is None:
        raise NotFoundException(resource="Product", resource_id=product_id)
    return ProductResponse.model_validate(product)
