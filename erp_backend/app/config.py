import yaml
import os
from pathlib import Path
from pydantic import BaseModel, Field
from typing import Optional
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

from erp_backend.app.core.logging_config import LoggingConfig, setup_logging

load_dotenv(dotenv_path=PROJECT_ROOT / ".env")


class BackendConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    data_dir: str = "data"


class DataSourcesConfig(BaseModel):
    box_in_hand_file: str = "TBL_BOXINHAND.xls"
    export_orders_file: str = "TBL_SALESORDER_EXPORT.xls"
    local_orders_file: str = "TBL_SALESORDER_LOCAL.xls"
    sheet_name: str = "Export Worksheet"


class AnalyticsConfig(BaseModel):
    cache_ttl_seconds: int = 300  # 5 minutes
    value_per_kg: float = 1000
    stock_threshold_boxes: float = 10
    low_stock_factor: float = 0.5
    high_stock_factor: float = 2
    recent_orders_limit: int = 10
    high_priority_gap: float = 50
    medium_priority_gap: float = 20
    demand_cover_months: float = 2
    liquidation_ratio: float = 0.3
    high_urgency_multiplier: float = 3
    medium_urgency_multiplier: float = 1.5
    price_decrease_multiplier: float = 2
    price_increase_multiplier: float = 0.5


class Settings(BaseModel):
    backend: BackendConfig = Field(default_factory=BackendConfig)
    data_sources: DataSourcesConfig = Field(default_factory=DataSourcesConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    app_title: str = "Manufacturing ERP Analytics API"


def load_config(config_file_path: Optional[Path] = None) -> Settings:
    config_file_path = config_file_path or PROJECT_ROOT / "config" / "settings.yaml"

    config_data = {}
    if config_file_path.exists():
        with open(config_file_path, "r") as f:
            config_data = yaml.safe_load(f) or {}

    backend_data = config_data.setdefault("backend", {})
    data_dir = os.environ.get("ERP_DATA_DIR") or backend_data.get("data_dir", "data")
    backend_data["data_dir"] = str(PROJECT_ROOT / data_dir)

    loaded_settings = Settings(**config_data)

    setup_logging(loaded_settings.logging, PROJECT_ROOT)

    return loaded_settings


settings = load_config()
