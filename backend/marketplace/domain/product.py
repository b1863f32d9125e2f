"""
Product Domain Model

Represents a marketplace listing owned by a seller.
This is the single source of truth for product data structure.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ProductStatus(str, Enum):
    """
    Product lifecycle: active -> soft_deleted -> hard deleted (row removed).

    soft_deleted -> active is a restore from trash. A hard delete is only
    reachable from soft_deleted.
    """
    ACTIVE = "active"
    SOFT_DELETED = "soft_deleted"


class Product(BaseModel):
    """
    Product domain model - represents a listing in the marketplace

    Fields:
        id: Internal product ID (primary key)
        seller_id: Owning seller (users.id)
        name: Product name
        description: Product description (optional)
        category: Product category (optional)
        price: Unit price
        stock: Units available
        status: Lifecycle status (active / soft_deleted)
        deleted_at: When the product was moved to trash
        created_at: When product was created
        updated_at: When product was last updated
    """

    id: int = Field(..., description="Internal product ID")
    seller_id: int = Field(..., description="Owning seller ID")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    category: Optional[str] = Field(None, description="Product category")
    price: Decimal = Field(..., description="Unit price", ge=0)
    stock: int = Field(0, description="Units available", ge=0)

    status: ProductStatus = Field(ProductStatus.ACTIVE, description="Lifecycle status")
    deleted_at: Optional[datetime] = Field(None, description="Moved-to-trash timestamp")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_deleted(self) -> bool:
        """True while the product sits in the trash"""
        return self.status == ProductStatus.SOFT_DELETED

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump(mode="json")
        data["price"] = float(self.price)
        data["is_deleted"] = self.is_deleted
        return data


class ProductCreate(BaseModel):
    """Payload for listing a new product"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    category: Optional[str] = Field(None, max_length=100)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    stock: int = Field(0, ge=0)
