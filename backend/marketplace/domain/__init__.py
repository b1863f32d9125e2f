"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from marketplace.domain.product import Product, ProductCreate, ProductStatus
from marketplace.domain.user import User, UserCredentials
from marketplace.domain.payment import PaymentCreate
from marketplace.domain.revenue import PeriodRevenue, SellerRevenue

__all__ = [
    'Product', 'ProductCreate', 'ProductStatus',
    'User', 'UserCredentials',
    'PaymentCreate',
    'PeriodRevenue', 'SellerRevenue',
]
