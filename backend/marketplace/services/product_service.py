"""
Product Service
Listing management and the two-phase delete (trash, then permanent delete)

Every mutation follows the same order: principal present, product exists,
lifecycle precondition, ownership; only then one state transition.
"""
import logging
from typing import List, Optional, Tuple

from marketplace.core.auth import Principal
from marketplace.core.errors import AuthorizationError, BadRequestError, NotFoundError
from marketplace.core.policies import Action, authorize
from marketplace.domain.product import Product, ProductCreate, ProductStatus
from marketplace.repositories.product_repository import ProductRepository


logger = logging.getLogger(__name__)


class ProductService:
    """Guarded product operations on top of ProductRepository"""

    def __init__(self, repository: ProductRepository = None):
        self.repository = repository or ProductRepository()

    @staticmethod
    def _require_principal(principal: Optional[Principal]) -> Principal:
        if principal is None:
            raise AuthorizationError("Authentication required")
        return principal

    def _get_or_404(self, product_id: int) -> Product:
        product = self.repository.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def list_products(self, seller_id: Optional[int] = None, search: Optional[str] = None,
                      limit: int = 100, offset: int = 0) -> Tuple[List[Product], int]:
        return self.repository.find_all(
            status=ProductStatus.ACTIVE,
            seller_id=seller_id,
            search=search,
            limit=limit,
            offset=offset
        )

    def list_trash(self, principal: Optional[Principal], limit: int = 100,
                   offset: int = 0) -> Tuple[List[Product], int]:
        """Sellers see their own trash; admins see everything"""
        principal = self._require_principal(principal)
        authorize(principal, Action.PRODUCT_CREATE)
        seller_id = None if principal.is_admin else int(principal.id)
        return self.repository.find_all(
            status=ProductStatus.SOFT_DELETED,
            seller_id=seller_id,
            limit=limit,
            offset=offset
        )

    def get_product(self, product_id: int) -> Product:
        """Active product by ID; trashed products are not publicly visible"""
        product = self._get_or_404(product_id)
        if product.is_deleted:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, principal: Optional[Principal], data: ProductCreate) -> Product:
        principal = self._require_principal(principal)
        authorize(principal, Action.PRODUCT_CREATE)
        product = self.repository.create(int(principal.id), data)
        logger.info(f"Product {product.id} created by user {principal.id}")
        return product

    def move_to_trash(self, principal: Optional[Principal], product_id: int) -> Product:
        principal = self._require_principal(principal)
        product = self._get_or_404(product_id)
        if product.is_deleted:
            raise BadRequestError("Product is already in trash")
        authorize(principal, Action.PRODUCT_TRASH, product)

        trashed = self.repository.move_to_trash(product_id)
        if trashed is None:
            # Changed state between the read and the conditional update
            raise BadRequestError("Product is already in trash")
        logger.info(f"Product {product_id} moved to trash by user {principal.id}")
        return trashed

    def restore(self, principal: Optional[Principal], product_id: int) -> Product:
        principal = self._require_principal(principal)
        product = self._get_or_404(product_id)
        if not product.is_deleted:
            raise BadRequestError("Product is not in trash")
        authorize(principal, Action.PRODUCT_RESTORE, product)

        restored = self.repository.restore(product_id)
        if restored is None:
            raise BadRequestError("Product is not in trash")
        logger.info(f"Product {product_id} restored by user {principal.id}")
        return restored

    def permanently_delete(self, principal: Optional[Principal], product_id: int) -> None:
        """
        Hard delete a product that is already in the trash.

        Raises:
            AuthorizationError: no principal, product not in trash, or
                caller neither admin nor owning seller
            NotFoundError: product does not exist
        """
        principal = self._require_principal(principal)
        product = self._get_or_404(product_id)
        authorize(principal, Action.PRODUCT_DELETE, product)

        if not self.repository.hard_delete(product_id):
            # Restored or removed concurrently; report what is true now
            current = self._get_or_404(product_id)
            authorize(principal, Action.PRODUCT_DELETE, current)
            raise NotFoundError("Product not found")

        logger.info(f"Product {product_id} permanently deleted by user {principal.id}")


# Singleton instance for easy import
_product_service: Optional[ProductService] = None

def get_product_service() -> ProductService:
    """Get the singleton product service instance"""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service
