"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.
State transitions are written as conditional statements so a row only moves
along the lifecycle from the state the caller checked.
"""
from typing import List, Optional, Tuple

from marketplace.core.database import get_db_connection_dict
from marketplace.domain.product import Product, ProductCreate, ProductStatus


PRODUCT_COLUMNS = """
    id, seller_id, name, description, category, price, stock,
    status, deleted_at, created_at, updated_at
"""


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        return Product(
            id=row['id'],
            seller_id=row['seller_id'],
            name=row['name'],
            description=row.get('description'),
            category=row.get('category'),
            price=row['price'],
            stock=row.get('stock') or 0,
            status=row['status'],
            deleted_at=row.get('deleted_at'),
            created_at=row['created_at'],
            updated_at=row.get('updated_at')
        )

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find product by ID, whatever its status

        Args:
            product_id: Internal product ID

        Returns:
            Product or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE id = %s
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        status: ProductStatus = ProductStatus.ACTIVE,
        seller_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            status: Lifecycle status to list (active by default)
            seller_id: Only this seller's products
            search: Search in name or category
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = ["status = %s"]
            params = [status.value]

            if seller_id is not None:
                conditions.append("seller_id = %s")
                params.append(seller_id)

            if search:
                conditions.append("(name ILIKE %s OR category ILIKE %s)")
                search_term = f"%{search}%"
                params.extend([search_term, search_term])

            where_clause = " AND ".join(conditions)

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM products
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE {where_clause}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            products = [self._map_row_to_product(row) for row in cursor.fetchall()]

            return products, total

        finally:
            cursor.close()
            conn.close()

    def create(self, seller_id: int, data: ProductCreate) -> Product:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO products (seller_id, name, description, category, price, stock,
                                      status, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, NOW(), NOW())
                RETURNING {PRODUCT_COLUMNS}
            """, (
                seller_id, data.name, data.description, data.category,
                data.price, data.stock, ProductStatus.ACTIVE.value
            ))
            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row)
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def _transition(self, product_id: int, from_status: ProductStatus,
                    to_status: ProductStatus, deleted_at_sql: str) -> Optional[Product]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE products
                SET status = %s, deleted_at = {deleted_at_sql}, updated_at = NOW()
                WHERE id = %s AND status = %s
                RETURNING {PRODUCT_COLUMNS}
            """, (to_status.value, product_id, from_status.value))
            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row) if row else None
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def move_to_trash(self, product_id: int) -> Optional[Product]:
        """Soft delete. Returns None if the product was not active."""
        return self._transition(product_id, ProductStatus.ACTIVE, ProductStatus.SOFT_DELETED, "NOW()")

    def restore(self, product_id: int) -> Optional[Product]:
        """Move a product back out of the trash. Returns None if it was not trashed."""
        return self._transition(product_id, ProductStatus.SOFT_DELETED, ProductStatus.ACTIVE, "NULL")

    def hard_delete(self, product_id: int) -> bool:
        """
        Permanently remove a product that is already in the trash.

        Returns:
            True if a soft-deleted row was removed, False otherwise
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM products
                WHERE id = %s AND status = %s
                RETURNING id
            """, (product_id, ProductStatus.SOFT_DELETED.value))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
