"""
Unit tests for the spreadsheet analytics aggregation and its cache window.
"""

import pytest
from cachetools import TTLCache

from erp_backend.app.config import AnalyticsConfig
from erp_backend.app.db.schemas import ExcelDataset
from erp_backend.app.services import analytics_service as analytics_service_module
from erp_backend.app.services.analytics_service import AnalyticsService
from erp_backend.app.services.schemas import AnalyticsResponse


@pytest.fixture
def service() -> AnalyticsService:
    return AnalyticsService(cache=TTLCache(maxsize=1, ttl=300), loader=ExcelDataset)


def _export_order(description, quantity, **extra):
    row = {"SOE_PRODUCTDESC": description, "SOE_QTY": quantity}
    row.update(extra)
    return row


class TestOrderAnalytics:
    def test_totals(self, service, sample_dataset):
        orders = service.analyze_orders(sample_dataset)

        assert orders.total_orders == 4
        assert orders.total_quantity == 165
        assert orders.total_value == 240000
        assert orders.export_orders == 2
        assert orders.local_orders == 2

    def test_group_by_views(self, service, sample_dataset):
        orders = service.analyze_orders(sample_dataset)

        assert {k: v.quantity for k, v in orders.orders_by_product.items()} == {
            "PSF": 100,
            "DTY": 40,
            "FDY": 25,
            "Other": 0,
        }
        acme = orders.orders_by_customer["Acme Textiles"]
        assert (acme.quantity, acme.value, acme.count) == (125, 180000, 2)
        assert orders.orders_by_country["Bangladesh"].count == 2
        assert orders.orders_by_country["Unknown"].count == 1

    def test_group_quantities_sum_to_total(self, service, sample_dataset):
        orders = service.analyze_orders(sample_dataset)

        for view in (
            orders.orders_by_product,
            orders.orders_by_customer,
            orders.orders_by_country,
        ):
            assert sum(b.quantity for b in view.values()) == orders.total_quantity
            assert sum(b.count for b in view.values()) == orders.total_orders

    def test_recent_orders_newest_first(self, service, sample_dataset):
        orders = service.analyze_orders(sample_dataset)

        assert [o.order_number for o in orders.recent_orders] == [
            "SO-101",
            "PI-002",
            "PI-001",
            "SO-102",
        ]
        assert orders.recent_orders[0].type == "local"
        assert orders.recent_orders[0].date == "2024-03-10"

    def test_recent_orders_capped_at_ten(self, service):
        dataset = ExcelDataset(
            export_orders=[
                _export_order("PSF", 1, SOE_PINUMBER=f"PI-{day:02d}", SOE_PIDATE=f"{day:02d}-JAN-24")
                for day in range(1, 16)
            ]
        )
        recent = service.analyze_orders(dataset).recent_orders

        assert len(recent) == 10
        assert recent[0].order_number == "PI-15"
        assert recent[-1].order_number == "PI-06"

    def test_empty_dataset(self, service):
        orders = service.analyze_orders(ExcelDataset())
        assert orders.total_orders == 0
        assert orders.orders_by_product == {}
        assert orders.recent_orders == []


class TestStockAnalytics:
    def test_totals_and_estimated_value(self, service, sample_dataset):
        stock = service.analyze_stock(sample_dataset)

        assert stock.total_boxes == 4
        assert stock.total_weight == 90
        assert stock.total_value == 90000

    def test_group_by_views(self, service, sample_dataset):
        stock = service.analyze_stock(sample_dataset)

        dty = stock.stock_by_product["DTY-150"]
        assert (dty.boxes, dty.weight, dty.avg_weight) == (3, 60, 20)
        assert stock.stock_by_location["WH-A"].boxes == 2
        assert stock.stock_by_location["Unknown"].weight == 30
        assert stock.stock_by_grade["A"].weight == 70
        assert sum(b.weight for b in stock.stock_by_grade.values()) == stock.total_weight

    def test_status_uses_product_average_box_weight(self, service):
        def boxes(code, count, weight=10.0):
            return [{"PRODUCTCODE": code, "DENIER": "75", "NETWT": weight}] * count

        dataset = ExcelDataset(
            box_in_hand=boxes("FDY", 4) + boxes("DTY", 10) + boxes("POY", 21)
        )
        items = {i.product: i for i in service.analyze_stock(dataset).low_stock_items}

        assert items["FDY-75"].threshold == 100
        assert items["FDY-75"].status == "low"
        assert items["DTY-75"].status == "normal"
        assert items["POY-75"].status == "high"
        assert items["POY-75"].current_stock == 210


class TestProductionNeeds:
    def test_single_psf_order_without_stock(self, service):
        dataset = ExcelDataset(export_orders=[_export_order("PSF 1.4D", 100)])
        needs = service.analyze_production_needs(dataset)

        (gap,) = needs.production_gaps
        assert gap.product == "PSF"
        assert gap.production_needed == 100
        assert gap.gap_percentage == 100
        assert gap.priority == "high"
        assert needs.total_production_needed == 100
        assert needs.high_priority_items == 1

    def test_sample_gaps(self, service, sample_dataset):
        needs = service.analyze_production_needs(sample_dataset)
        gaps = {g.product: g for g in needs.production_gaps}

        assert set(gaps) == {"PSF", "DTY", "FDY", "Other"}
        assert gaps["DTY"].current_stock == 60
        assert gaps["DTY"].production_needed == 0
        assert gaps["DTY"].priority == "low"
        assert needs.total_production_needed == 125
        assert (
            needs.high_priority_items,
            needs.medium_priority_items,
            needs.low_priority_items,
        ) == (2, 0, 2)

    def test_medium_priority(self, service):
        dataset = ExcelDataset(
            export_orders=[_export_order("DTY", 100)],
            box_in_hand=[{"PRODUCTCODE": "DTY", "NETWT": 70}],
        )
        (gap,) = service.analyze_production_needs(dataset).production_gaps
        assert gap.production_needed == 30
        assert gap.gap_percentage == pytest.approx(30)
        assert gap.priority == "medium"

    def test_zero_demand_has_zero_gap(self, service):
        dataset = ExcelDataset(export_orders=[_export_order("PSF", 0)])
        (gap,) = service.analyze_production_needs(dataset).production_gaps
        assert gap.gap_percentage == 0
        assert gap.priority == "low"

    @pytest.mark.parametrize("demand, stock", [(-5, 10), (-5, -10), (5, 10), (0, -3)])
    def test_production_needed_never_negative(self, service, demand, stock):
        dataset = ExcelDataset(
            export_orders=[_export_order("FDY", demand)],
            box_in_hand=[{"PRODUCTCODE": "FDY", "NETWT": stock}],
        )
        (gap,) = service.analyze_production_needs(dataset).production_gaps
        assert gap.production_needed >= 0
        assert gap.gap_percentage >= 0


class TestSalesRecommendations:
    def test_sample_recommendations(self, service, sample_dataset):
        sales = service.analyze_sales_recommendations(sample_dataset)
        recs = {r.product: r for r in sales.recommendations}

        assert set(recs) == {"DTY", "POY"}

        dty = recs["DTY"]
        assert dty.excess_stock == 0
        assert dty.liquidation_needed == 0
        assert dty.urgency == "low"
        assert dty.price_recommendation == "increase"
        assert dty.recommended_action == "Maintain current stock levels"

        poy = recs["POY"]
        assert poy.excess_stock == 30
        assert poy.liquidation_needed == pytest.approx(9.0)
        assert poy.urgency == "high"
        assert poy.price_recommendation == "decrease"
        assert poy.recommended_action == "Liquidate 9.0 kg of excess stock"

        assert sales.total_excess_stock == 30
        assert sales.total_liquidation_needed == pytest.approx(9.0)

    @pytest.mark.parametrize(
        "stock, urgency, price",
        [
            (120, "medium", "maintain"),  # excess 60: > 1.5x, = 2x demand
            (170, "high", "decrease"),  # excess 110: > 3x demand
            (75, "low", "maintain"),  # excess 15: = 0.5x demand
        ],
    )
    def test_thresholds(self, service, stock, urgency, price):
        dataset = ExcelDataset(
            export_orders=[_export_order("FDY", 30)],
            box_in_hand=[{"PRODUCTCODE": "FDY", "NETWT": stock}],
        )
        (rec,) = service.analyze_sales_recommendations(dataset).recommendations
        assert rec.urgency == urgency
        assert rec.price_recommendation == price

    def test_configurable_constants(self, sample_dataset):
        config = AnalyticsConfig(value_per_kg=2.5, liquidation_ratio=0.5)
        svc = AnalyticsService(cache=TTLCache(maxsize=1, ttl=300), config=config)

        assert svc.analyze_stock(sample_dataset).total_value == 225
        sales = svc.analyze_sales_recommendations(sample_dataset)
        assert sales.total_liquidation_needed == 15


class TestAnalyticsCache:
    def test_same_object_within_window(self, analytics_service, clock, load_calls):
        first = analytics_service.get_analytics()
        clock.advance(299)
        second = analytics_service.get_analytics()

        assert second is first
        assert len(load_calls) == 1

    def test_recomputes_after_window(self, analytics_service, clock, load_calls):
        first = analytics_service.get_analytics()
        clock.advance(301)
        second = analytics_service.get_analytics()

        assert second is not first
        assert len(load_calls) == 2
        assert second.orders == first.orders

    def test_clear_cache(self, analytics_service, load_calls):
        analytics_service.get_analytics()
        analytics_service.clear_cache()
        analytics_service.get_analytics()
        assert len(load_calls) == 2

    def test_loader_error_is_not_cached(self, clock):
        calls = []

        def failing_loader():
            calls.append(1)
            raise OSError("disk unavailable")

        svc = AnalyticsService(
            cache=TTLCache(maxsize=1, ttl=300, timer=clock), loader=failing_loader
        )
        for _ in range(2):
            with pytest.raises(OSError):
                svc.get_analytics()
        assert len(calls) == 2

    def test_response_sections(self, analytics_service):
        response = analytics_service.get_analytics()
        body = response.model_dump(by_alias=True)

        assert set(body) == {
            "orders",
            "stock",
            "productionNeeds",
            "salesRecommendations",
            "timestamp",
        }
        assert "ordersByProduct" in body["orders"]
        assert "avgWeight" in body["stock"]["stockByProduct"]["DTY-150"]

    def test_result_models_live_in_service_layer(self, analytics_service):
        response = analytics_service.get_analytics()

        assert isinstance(response, AnalyticsResponse)
        api_names = [
            name
            for name, value in vars(analytics_service_module).items()
            if (getattr(value, "__module__", None) or "").startswith("erp_backend.app.api")
        ]
        assert api_names == []
