"""
Products API Endpoints
Listings, trash (soft delete) and permanent deletion
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from marketplace.core.auth import Principal, get_current_user_optional
from marketplace.domain.product import ProductCreate
from marketplace.services.product_service import ProductService, get_product_service

router = APIRouter()


@router.get("/")
def get_products(
    seller_id: Optional[int] = Query(None, description="Filter by seller"),
    search: Optional[str] = Query(None, description="Search by name or category"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: ProductService = Depends(get_product_service)
):
    """List active products"""
    products, total = service.list_products(seller_id=seller_id, search=search, limit=limit, offset=offset)

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(products),
        "data": [product.to_dict() for product in products]
    }


@router.get("/trash")
def get_trash(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    principal: Optional[Principal] = Depends(get_current_user_optional),
    service: ProductService = Depends(get_product_service)
):
    """Soft-deleted products of the caller (all of them for admins)"""
    products, total = service.list_trash(principal, limit=limit, offset=offset)

    return {
        "status": "success",
        "total": total,
        "count": len(products),
        "data": [product.to_dict() for product in products]
    }


@router.get("/{product_id}")
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    product = service.get_product(product_id)
    return {"status": "success", "data": product.to_dict()}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    principal: Optional[Principal] = Depends(get_current_user_optional),
    service: ProductService = Depends(get_product_service)
):
    product = service.create_product(principal, data)
    return {"status": "success", "data": product.to_dict()}


@router.patch("/{product_id}/trash")
def move_product_to_trash(
    product_id: int,
    principal: Optional[Principal] = Depends(get_current_user_optional),
    service: ProductService = Depends(get_product_service)
):
    """Soft delete: the product disappears from listings but can be restored"""
    product = service.move_to_trash(principal, product_id)
    return {
        "status": "success",
        "message": "Product moved to trash",
        "data": product.to_dict()
    }


@router.patch("/{product_id}/restore")
def restore_product(
    product_id: int,
    principal: Optional[Principal] = Depends(get_current_user_optional),
    service: ProductService = Depends(get_product_service)
):
    product = service.restore(principal, product_id)
    return {
        "status": "success",
        "message": "Product restored",
        "data": product.to_dict()
    }


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    principal: Optional[Principal] = Depends(get_current_user_optional),
    service: ProductService = Depends(get_product_service)
):
    """
    Permanently delete a product

    Only products already in the trash can be deleted, and only by their
    seller or an admin. The deletion cannot be undone.
    """
    service.permanently_delete(principal, product_id)
    return {"message": "Product permanently deleted successfully"}
