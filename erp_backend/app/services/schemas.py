# erp_backend/app/services/schemas.py
"""Result models for the analytics views, serialized with camelCase keys."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Orders ---
class OrderBucket(CamelModel):
    quantity: float = 0
    value: float = 0
    count: int = 0


class RecentOrder(CamelModel):
    order_number: Optional[str] = None
    customer: str
    product: str
    quantity: float
    value: float
    date: Optional[str] = None
    type: Literal["export", "local"]


class OrderAnalytics(CamelModel):
    total_orders: int
    total_quantity: float
    total_value: float
    export_orders: int
    local_orders: int
    orders_by_product: Dict[str, OrderBucket] = Field(default_factory=dict)
    orders_by_customer: Dict[str, OrderBucket] = Field(default_factory=dict)
    orders_by_country: Dict[str, OrderBucket] = Field(default_factory=dict)
    recent_orders: List[RecentOrder] = Field(default_factory=list)


# --- Stock ---
class StockBucket(CamelModel):
    boxes: int = 0
    weight: float = 0


class ProductStockBucket(StockBucket):
    avg_weight: float = 0


class LowStockItem(CamelModel):
    product: str
    current_stock: float
    threshold: float
    status: Literal["low", "normal", "high"]


class StockAnalytics(CamelModel):
    total_boxes: int
    total_weight: float
    total_value: float
    stock_by_product: Dict[str, ProductStockBucket] = Field(default_factory=dict)
    stock_by_location: Dict[str, StockBucket] = Field(default_factory=dict)
    stock_by_grade: Dict[str, StockBucket] = Field(default_factory=dict)
    low_stock_items: List[LowStockItem] = Field(default_factory=list)


# --- Production Needs ---
Priority = Literal["high", "medium", "low"]


class ProductionGap(CamelModel):
    product: str
    demand: float
    current_stock: float
    production_needed: float
    gap_percentage: float
    priority: Priority


class ProductionNeedsAnalytics(CamelModel):
    total_production_needed: float
    high_priority_items: int
    medium_priority_items: int
    low_priority_items: int
    production_gaps: List[ProductionGap] = Field(default_factory=list)


# --- Sales Recommendations ---
class SalesRecommendation(CamelModel):
    product: str
    current_stock: float
    excess_stock: float
    liquidation_needed: float
    recommended_action: str
    urgency: Priority
    price_recommendation: Literal["increase", "maintain", "decrease"]


class SalesRecommendationsAnalytics(CamelModel):
    total_excess_stock: float
    total_liquidation_needed: float
    recommendations: List[SalesRecommendation] = Field(default_factory=list)


class AnalyticsResponse(CamelModel):
    orders: OrderAnalytics
    stock: StockAnalytics
    production_needs: ProductionNeedsAnalytics
    sales_recommendations: SalesRecommendationsAnalytics
    timestamp: str
