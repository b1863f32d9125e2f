"""
Revenue Repository - aggregation queries over paid orders

Only orders with payment_status = 'paid' count as revenue. Period keys are
built in UTC so buckets don't shift with the session time zone.
"""
from datetime import datetime
from enum import Enum
from typing import List

from marketplace.core.database import get_db_connection_dict
from marketplace.domain.revenue import PeriodRevenue, SellerRevenue


PAID = 'paid'


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


# to_char patterns producing 2025-05-29, 2025-W21, 2025-05, 2025
PERIOD_FORMATS = {
    Granularity.DAY: 'YYYY-MM-DD',
    Granularity.WEEK: 'IYYY-"W"IW',
    Granularity.MONTH: 'YYYY-MM',
    Granularity.YEAR: 'YYYY',
}


class RevenueRepository:
    """Read-only revenue aggregations"""

    def get_seller_revenue(self, seller_id: int) -> float:
        """Sum of price x quantity of the seller's items in paid orders"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT COALESCE(SUM(oi.price * oi.quantity), 0) AS seller_revenue
                FROM order_items oi
                JOIN orders o ON o.id = oi.order_id
                WHERE o.payment_status = %s
                  AND oi.seller_id = %s
            """, (PAID, seller_id))
            return float(cursor.fetchone()['seller_revenue'])
        finally:
            cursor.close()
            conn.close()

    def get_total_revenue(self) -> float:
        """Platform-wide sum of paid order totals"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT COALESCE(SUM(total_amount), 0) AS total_revenue
                FROM orders
                WHERE payment_status = %s
            """, (PAID,))
            return float(cursor.fetchone()['total_revenue'])
        finally:
            cursor.close()
            conn.close()

    def get_revenue_by_period(
        self,
        start: datetime,
        end: datetime,
        granularity: Granularity
    ) -> List[PeriodRevenue]:
        """
        Group paid order totals into period buckets

        Args:
            start: Inclusive lower bound (UTC)
            end: Exclusive upper bound (UTC)
            granularity: Bucket size

        Returns:
            Buckets ordered by period key; periods without revenue are omitted
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    TO_CHAR(created_at AT TIME ZONE 'UTC', %s) AS period_id,
                    SUM(total_amount) AS total
                FROM orders
                WHERE payment_status = %s
                  AND created_at >= %s
                  AND created_at < %s
                GROUP BY period_id
                ORDER BY period_id
            """, (PERIOD_FORMATS[granularity], PAID, start, end))

            return [
                PeriodRevenue(period_id=row['period_id'], total=float(row['total']))
                for row in cursor.fetchall()
            ]
        finally:
            cursor.close()
            conn.close()

    def get_revenue_per_seller(self) -> List[SellerRevenue]:
        """Revenue and sold item count per seller, highest revenue first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    oi.seller_id,
                    COALESCE(u.name, u.email) AS seller_name,
                    SUM(oi.price * oi.quantity) AS total_revenue,
                    COUNT(oi.id) AS order_count
                FROM order_items oi
                JOIN orders o ON o.id = oi.order_id
                JOIN users u ON u.id = oi.seller_id
                WHERE o.payment_status = %s
                GROUP BY oi.seller_id, u.name, u.email
                ORDER BY total_revenue DESC, oi.seller_id
            """, (PAID,))

            return [
                SellerRevenue(
                    seller_id=str(row['seller_id']),
                    seller_name=row['seller_name'],
                    total_revenue=float(row['total_revenue']),
                    order_count=row['order_count']
                )
                for row in cursor.fetchall()
            ]
        finally:
            cursor.close()
            conn.close()
