from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_async_session
from app.core.security import validate_request
from app.models.product import ProductRead
from app.schemas.auth_schemas import APIResponse, AuthenticatedUser
from app.schemas.product_schemas import ProductCreateRequest, ProductUpdateRequest
from app.services.product_service import ProductService, get_product_service
from typing import List, Type, TypeVar
import structlog

logger = structlog.get_logger()

router = APIRouter(prefix="/products", tags=["Products"])

BodyType = TypeVar("BodyType", bound=BaseModel)


async def _parse_body(request: Request, model: Type[BodyType]) -> BodyType:
    try:
        return model.model_validate_json(await request.body())
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))


# Bodies are read only after the bearer token has been validated
async def product_create_body(
    request: Request,
    _: AuthenticatedUser = Depends(validate_request)
) -> ProductCreateRequest:
    return await _parse_body(request, ProductCreateRequest)


async def product_update_body(
    request: Request,
    _: AuthenticatedUser = Depends(validate_request)
) -> ProductUpdateRequest:
    return await _parse_body(request, ProductUpdateRequest)


@router.get("", response_model=List[ProductRead])
async def get_products(
    db: AsyncSession = Depends(get_async_session),
    service: ProductService = Depends(get_product_service)
):
    """List all products"""
    return await service.get_products(db)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_async_session),
    service: ProductService = Depends(get_product_service)
):
    return await service.get_product(db, product_id)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    current_user: AuthenticatedUser = Depends(validate_request),
    product: ProductCreateRequest = Depends(product_create_body),
    db: AsyncSession = Depends(get_async_session),
    service: ProductService = Depends(get_product_service)
):
    """Create a product owned by the authenticated caller"""
    return await service.create_product(db, product, current_user.user_id)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: int,
    current_user: AuthenticatedUser = Depends(validate_request),
    product_update: ProductUpdateRequest = Depends(product_update_body),
    db: AsyncSession = Depends(get_async_session),
    service: ProductService = Depends(get_product_service)
):
    """Overwrite a product's name and price"""
    return await service.update_product(db, product_id, product_update, current_user.user_id)


@router.delete("/{product_id}", response_model=APIResponse)
async def delete_product(
    product_id: int,
    current_user: AuthenticatedUser = Depends(validate_request),
    db: AsyncSession = Depends(get_async_session),
    service: ProductService = Depends(get_product_service)
):
    await service.delete_product(db, product_id, current_user.user_id)
    return APIResponse(message="Product deleted", success=True, data={"id": product_id})
