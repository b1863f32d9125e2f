"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from marketplace.repositories.product_repository import ProductRepository
from marketplace.repositories.user_repository import UserRepository
from marketplace.repositories.revenue_repository import RevenueRepository

__all__ = [
    'ProductRepository',
    'UserRepository',
    'RevenueRepository'
]
