"""
Revenue Domain Models

Aggregated revenue rows returned by the reporting endpoints.
Serialized with the wire names the clients already consume
(`_id` for the period key, a per-report total key such as `dailyTotal`,
camelCase for per-seller rows).
"""
from pydantic import BaseModel, ConfigDict, Field


class PeriodRevenue(BaseModel):
    """Revenue for one period bucket (day, ISO week, month or year)"""
    period_id: str
    total: float = 0.0

    def to_dict(self, total_key: str) -> dict:
        """Serialize as {"_id": period, <total_key>: total}, e.g. total_key="weeklyTotal" """
        return {"_id": self.period_id, total_key: self.total}


class SellerRevenue(BaseModel):
    seller_id: str = Field(..., serialization_alias="sellerId")
    seller_name: str = Field(..., serialization_alias="sellerName")
    total_revenue: float = Field(0.0, serialization_alias="totalRevenue")
    order_count: int = Field(0, serialization_alias="orderCount")

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)
