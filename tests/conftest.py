"""
Shared fixtures: a small spreadsheet dataset with known aggregates and an
AnalyticsService wired to a fake clock so the cache window can be stepped.
"""

import pytest
from cachetools import TTLCache

from erp_backend.app.db.schemas import ExcelDataset
from erp_backend.app.services.analytics_service import AnalyticsService


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


EXPORT_ORDERS = [
    {
        "SOE_PINUMBER": "PI-001",
        "SOE_CONSIGNEE": "Acme Textiles",
        "SOE_PRODUCTDESC": "Polyester Staple Fiber 1.4D x 38mm",
        "SOE_QTY": 100,
        "SOE_TOTALAMOUNT": 150000,
        "SOE_PIDATE": "05-JAN-24",
        "SOE_COUNTRY": "Bangladesh",
    },
    {
        "SOE_PINUMBER": "PI-002",
        "SOE_CONSIGNEE": "Dhaka Knit",
        "SOE_PRODUCTDESC": "DTY 150/48 SD RW",
        "SOE_QTY": 40,
        "SOE_TOTALAMOUNT": 60000,
        "SOE_PIDATE": "20-FEB-24",
        "SOE_COUNTRY": "Bangladesh",
    },
]

LOCAL_ORDERS = [
    {
        "SOL_NUMBER": "SO-101",
        "SOL_CUSTOMERNAME": "Acme Textiles",
        "SOL_PRODUCTDESCRIPTION": "Fully Drawn Yarn 75D/36F",
        "SOL_QTY": 25,
        "SOL_TOTALAMOUNT": 30000,
        "SOL_DATE": "10-MAR-24",
        "SOL_CUSTOMERCOUNTRY": "Pakistan",
    },
    {
        "SOL_NUMBER": "SO-102",
        "SOL_CUSTOMERNAME": "Local Weaver",
        "SOL_PRODUCTDESCRIPTION": "Nylon chips",
        "SOL_QTY": None,
        "SOL_TOTALAMOUNT": None,
        "SOL_DATE": None,
        "SOL_CUSTOMERCOUNTRY": None,
    },
]

BOX_IN_HAND = [
    {"PRODUCTCODE": "DTY", "DENIER": 150.0, "NETWT": 20.0, "FGWLOCATION": "WH-A", "GRADECODE": "A"},
    {"PRODUCTCODE": "DTY", "DENIER": 150.0, "NETWT": 20.0, "FGWLOCATION": "WH-A", "GRADECODE": "A"},
    {"PRODUCTCODE": "DTY", "DENIER": 150.0, "NETWT": 20.0, "FGWLOCATION": "WH-B", "GRADECODE": "B"},
    {"PRODUCTCODE": "POY", "DENIER": "250", "NETWT": 30.0, "FGWLOCATION": None, "GRADECODE": "A"},
]


@pytest.fixture
def sample_dataset() -> ExcelDataset:
    return ExcelDataset(
        box_in_hand=[dict(row) for row in BOX_IN_HAND],
        export_orders=[dict(row) for row in EXPORT_ORDERS],
        local_orders=[dict(row) for row in LOCAL_ORDERS],
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def load_calls():
    return []


@pytest.fixture
def analytics_service(sample_dataset, clock, load_calls) -> AnalyticsService:
    def loader() -> ExcelDataset:
        load_calls.append(clock.now)
        return sample_dataset

    cache = TTLCache(maxsize=1, ttl=300, timer=clock)
    return AnalyticsService(cache=cache, loader=loader)
