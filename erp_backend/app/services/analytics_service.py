# erp_backend/app/services/analytics_service.py
import asyncio
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from cachetools import TTLCache
from loguru import logger

from erp_backend.app.config import settings, AnalyticsConfig
from erp_backend.app.core.memory_cache import (
    ANALYTICS_CACHE_KEY,
    analytics_response_cache,
)
from erp_backend.app.db.excel_source import load_excel_dataset
from erp_backend.app.db.schemas import ExcelDataset, OrderRecord, StockRecord
from erp_backend.app.services.schemas import (
    AnalyticsResponse,
    LowStockItem,
    OrderAnalytics,
    OrderBucket,
    ProductStockBucket,
    ProductionGap,
    ProductionNeedsAnalytics,
    RecentOrder,
    SalesRecommendation,
    SalesRecommendationsAnalytics,
    StockAnalytics,
    StockBucket,
)
from .normalization import normalize_orders, normalize_stock, parse_order_date


def _add_order(bucket: OrderBucket, order: OrderRecord) -> None:
    bucket.quantity += order.quantity
    bucket.value += order.value
    bucket.count += 1


def _add_box(bucket: StockBucket, box: StockRecord) -> None:
    bucket.boxes += 1
    bucket.weight += box.net_weight


class AnalyticsService:
    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        loader: Callable[[], ExcelDataset] = load_excel_dataset,
        config: Optional[AnalyticsConfig] = None,
    ):
        logger.info("Initializing AnalyticsService...")
        # an empty TTLCache is falsy, so compare against None
        self._cache = analytics_response_cache if cache is None else cache
        self._loader = loader
        self.config = config or settings.analytics
        logger.debug(
            f"AnalyticsService initialized. Cache TTL: {self._cache.ttl}s, value/kg: {self.config.value_per_kg}"
        )

    # --- Cached entry point ---
    def get_analytics(self) -> AnalyticsResponse:
        """
        Returns the analytics for the spreadsheet exports.

        Within the cache window every call returns the same response object;
        the first call after expiry reloads the files and recomputes.
        """
        cached = self._cache.get(ANALYTICS_CACHE_KEY)
        if cached is not None:
            logger.debug(f"Analytics cache hit (computed at {cached.timestamp}).")
            return cached

        logger.info("Analytics cache miss. Loading spreadsheet exports...")
        dataset = self._loader()
        response = self.build_analytics(dataset)
        self._cache[ANALYTICS_CACHE_KEY] = response
        logger.success(
            f"Analytics computed and cached at {response.timestamp}: "
            f"{response.orders.total_orders} orders, {response.stock.total_boxes} boxes."
        )
        return response

    def clear_cache(self) -> None:
        self._cache.pop(ANALYTICS_CACHE_KEY, None)
        logger.info("Analytics cache cleared.")

    def build_analytics(self, dataset: ExcelDataset) -> AnalyticsResponse:
        return AnalyticsResponse(
            orders=self.analyze_orders(dataset),
            stock=self.analyze_stock(dataset),
            production_needs=self.analyze_production_needs(dataset),
            sales_recommendations=self.analyze_sales_recommendations(dataset),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    # --- Orders ---
    def analyze_orders(self, dataset: ExcelDataset) -> OrderAnalytics:
        orders = normalize_orders(dataset)

        by_product: Dict[str, OrderBucket] = defaultdict(OrderBucket)
        by_customer: Dict[str, OrderBucket] = defaultdict(OrderBucket)
        by_country: Dict[str, OrderBucket] = defaultdict(OrderBucket)
        for order in orders:
            _add_order(by_product[order.product], order)
            _add_order(by_customer[order.customer], order)
            _add_order(by_country[order.country], order)

        return OrderAnalytics(
            total_orders=len(orders),
            total_quantity=sum(o.quantity for o in orders),
            total_value=sum(o.value for o in orders),
            export_orders=len(dataset.export_orders),
            local_orders=len(dataset.local_orders),
            orders_by_product=dict(by_product),
            orders_by_customer=dict(by_customer),
            orders_by_country=dict(by_country),
            recent_orders=self._recent_orders(orders),
        )

    def _recent_orders(self, orders: List[OrderRecord]) -> List[RecentOrder]:
        dated = []
        undated = []
        for order in orders:
            parsed = parse_order_date(order.date)
            if parsed is None:
                undated.append(order)
            else:
                dated.append((parsed, order))

        # sort is stable under reverse=True: same-day orders keep sheet order
        dated.sort(key=lambda pair: pair[0], reverse=True)
        newest_first = [order for _, order in dated] + undated

        return [
            RecentOrder(
                order_number=o.order_number,
                customer=o.customer,
                product=o.product,
                quantity=o.quantity,
                value=o.value,
                date=o.date,
                type=o.type,
            )
            for o in newest_first[: self.config.recent_orders_limit]
        ]

    # --- Stock ---
    def analyze_stock(self, dataset: ExcelDataset) -> StockAnalytics:
        cfg = self.config
        boxes = normalize_stock(dataset)

        by_product: Dict[str, ProductStockBucket] = defaultdict(ProductStockBucket)
        by_location: Dict[str, StockBucket] = defaultdict(StockBucket)
        by_grade: Dict[str, StockBucket] = defaultdict(StockBucket)
        for box in boxes:
            _add_box(by_product[box.product_key], box)
            _add_box(by_location[box.location], box)
            _add_box(by_grade[box.grade], box)

        low_stock_items = []
        for product_key, bucket in by_product.items():
            bucket.avg_weight = bucket.weight / bucket.boxes
            threshold = bucket.avg_weight * cfg.stock_threshold_boxes

            if bucket.weight < threshold * cfg.low_stock_factor:
                status = "low"
            elif bucket.weight > threshold * cfg.high_stock_factor:
                status = "high"
            else:
                status = "normal"

            low_stock_items.append(
                LowStockItem(
                    product=product_key,
                    current_stock=bucket.weight,
                    threshold=threshold,
                    status=status,
                )
            )

        total_weight = sum(box.net_weight for box in boxes)
        return StockAnalytics(
            total_boxes=len(boxes),
            total_weight=total_weight,
            total_value=total_weight * cfg.value_per_kg,
            stock_by_product=dict(by_product),
            stock_by_location=dict(by_location),
            stock_by_grade=dict(by_grade),
            low_stock_items=low_stock_items,
        )

    # --- Demand vs. stock ---
    def _demand_by_product(self, dataset: ExcelDataset) -> Dict[str, float]:
        demand: Dict[str, float] = defaultdict(float)
        for order in normalize_orders(dataset):
            demand[order.product] += order.quantity
        return dict(demand)

    def _stock_by_product(self, dataset: ExcelDataset) -> Dict[str, float]:
        stock: Dict[str, float] = defaultdict(float)
        for box in normalize_stock(dataset):
            stock[box.product] += box.net_weight
        return dict(stock)

    def analyze_production_needs(
        self, dataset: ExcelDataset
    ) -> ProductionNeedsAnalytics:
        cfg = self.config
        demand_by_product = self._demand_by_product(dataset)
        stock_by_product = self._stock_by_product(dataset)

        gaps: List[ProductionGap] = []
        for product, demand in demand_by_product.items():
            current_stock = stock_by_product.get(product, 0.0)
            production_needed = max(0.0, demand - current_stock)
            gap_percentage = (production_needed / demand) * 100 if demand > 0 else 0.0

            if gap_percentage > cfg.high_priority_gap:
                priority = "high"
            elif gap_percentage > cfg.medium_priority_gap:
                priority = "medium"
            else:
                priority = "low"

            gaps.append(
                ProductionGap(
                    product=product,
                    demand=demand,
                    current_stock=current_stock,
                    production_needed=production_needed,
                    gap_percentage=gap_percentage,
                    priority=priority,
                )
            )

        return ProductionNeedsAnalytics(
            total_production_needed=sum(g.production_needed for g in gaps),
            high_priority_items=sum(1 for g in gaps if g.priority == "high"),
            medium_priority_items=sum(1 for g in gaps if g.priority == "medium"),
            low_priority_items=sum(1 for g in gaps if g.priority == "low"),
            production_gaps=gaps,
        )

    # --- Excess stock / liquidation ---
    def analyze_sales_recommendations(
        self, dataset: ExcelDataset
    ) -> SalesRecommendationsAnalytics:
        cfg = self.config
        demand_by_product = self._demand_by_product(dataset)
        stock_by_product = self._stock_by_product(dataset)

        recommendations: List[SalesRecommendation] = []
        for product, current_stock in stock_by_product.items():
            monthly_demand = demand_by_product.get(product, 0.0)
            excess_stock = max(
                0.0, current_stock - monthly_demand * cfg.demand_cover_months
            )
            liquidation_needed = (
                excess_stock * cfg.liquidation_ratio if excess_stock > 0 else 0.0
            )

            if excess_stock > monthly_demand * cfg.high_urgency_multiplier:
                urgency = "high"
            elif excess_stock > monthly_demand * cfg.medium_urgency_multiplier:
                urgency = "medium"
            else:
                urgency = "low"

            if excess_stock > monthly_demand * cfg.price_decrease_multiplier:
                price_recommendation = "decrease"
            elif excess_stock < monthly_demand * cfg.price_increase_multiplier:
                price_recommendation = "increase"
            else:
                price_recommendation = "maintain"

            if excess_stock > 0:
                recommended_action = (
                    f"Liquidate {liquidation_needed:.1f} kg of excess stock"
                )
            else:
                recommended_action = "Maintain current stock levels"

            recommendations.append(
                SalesRecommendation(
                    product=product,
                    current_stock=current_stock,
                    excess_stock=excess_stock,
                    liquidation_needed=liquidation_needed,
                    recommended_action=recommended_action,
                    urgency=urgency,
                    price_recommendation=price_recommendation,
                )
            )

        return SalesRecommendationsAnalytics(
            total_excess_stock=sum(r.excess_stock for r in recommendations),
            total_liquidation_needed=sum(r.liquidation_needed for r in recommendations),
            recommendations=recommendations,
        )


# --- Service Singleton Management ---
_analytics_service_instance: Optional[AnalyticsService] = None
_service_creation_lock = asyncio.Lock()


async def get_analytics_service_instance() -> AnalyticsService:
    global _analytics_service_instance
    if _analytics_service_instance is None:
        async with _service_creation_lock:
            if _analytics_service_instance is None:
                _analytics_service_instance = AnalyticsService()
    return _analytics_service_instance


async def initialize_analytics_service_dependencies():
    await get_analytics_service_instance()
    logger.info(
        "AnalyticsService singleton instance ensured. Analytics are computed on first request and cached."
    )
