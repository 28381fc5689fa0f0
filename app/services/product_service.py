from typing import List
from fastapi import HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.dao.product_dao import ProductDAO
from app.models.product import Product
from app.schemas.product_schemas import ProductCreateRequest, ProductUpdateRequest
import structlog

logger = structlog.get_logger()


class ProductService:
    """Maps product requests onto the DAO and storage failures onto HTTP errors."""

    def __init__(self, product_dao: ProductDAO, enforce_ownership: bool = True):
        self.product_dao = product_dao
        self.enforce_ownership = enforce_ownership

    @staticmethod
    def _require_name(name: str) -> str:
        name = name.strip()
        if not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product name is required"
            )
        return name

    def _check_owner(self, product: Product, user_id: int, action: str):
        if self.enforce_ownership and product.user_id != user_id:
            logger.warning(f"Unauthorized product {action} attempt", product_id=product.id, user_id=user_id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not authorized to {action} this product"
            )

    async def get_products(self, db: AsyncSession) -> List[Product]:
        try:
            products = await self.product_dao.get_multi(db)
            logger.info("Retrieved products", count=len(products))
            return products
        except Exception as e:
            logger.error("Error getting products", error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Could not retrieve products"
            )

    async def get_product(self, db: AsyncSession, product_id: int) -> Product:
        try:
            product = await self.product_dao.get_by_id(db, product_id)
        except Exception as e:
            logger.error("Error getting product", product_id=product_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Could not retrieve product"
            )
        if not product:
            logger.warning("Product not found", product_id=product_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found"
            )
        return product

    async def create_product(self, db: AsyncSession, product_create: ProductCreateRequest, user_id: int) -> Product:
        name = self._require_name(product_create.name)
        product_data = {
            "name": name,
            "description": product_create.description,
            "price": product_create.price,
            "user_id": user_id,
        }
        try:
            product = await self.product_dao.create(db, obj_in=product_data)
            logger.info("Product created successfully", product_id=product.id, user_id=user_id)
            return product
        except Exception as e:
            logger.error("Error creating product", user_id=user_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Product creation failed"
            )

    async def update_product(
        self, db: AsyncSession, product_id: int, product_update: ProductUpdateRequest, user_id: int
    ) -> Product:
        name = self._require_name(product_update.name)
        product = await self.get_product(db, product_id)
        self._check_owner(product, user_id, "update")

        try:
            product = await self.product_dao.update(
                db, db_obj=product, obj_in={"name": name, "price": product_update.price}
            )
            logger.info("Product updated successfully", product_id=product_id, user_id=user_id)
            return product
        except Exception as e:
            logger.error("Error updating product", product_id=product_id, user_id=user_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Product update failed"
            )

    async def delete_product(self, db: AsyncSession, product_id: int, user_id: int) -> None:
        if self.enforce_ownership:
            product = await self.get_product(db, product_id)
            self._check_owner(product, user_id, "delete")

        try:
            deleted = await self.product_dao.delete(db, id=product_id)
        except Exception as e:
            logger.error("Error deleting product", product_id=product_id, user_id=user_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Product deletion failed"
            )

        if not deleted:
            logger.warning("Product not found", product_id=product_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found"
            )
        logger.info("Product deleted successfully", product_id=product_id, user_id=user_id)


def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service
