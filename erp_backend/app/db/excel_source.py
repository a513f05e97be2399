# erp_backend/app/db/excel_source.py
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

import pandas as pd
from loguru import logger

from erp_backend.app.config import settings
from erp_backend.app.core.errors import DataSourceError, MalformedSheetError
from .schemas import ExcelDataset


def load_excel_sheet(
    file_path: Union[str, Path], sheet_name: str
) -> List[Dict[str, Any]]:
    """
    Reads one worksheet of a legacy export into a list of row dicts.
    Empty cells come back as None rather than NaN.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataSourceError(f"Spreadsheet export not found: {file_path}")

    try:
        df = pd.read_excel(file_path, sheet_name=sheet_name)
    except OSError as e:
        raise DataSourceError(f"Could not read {file_path}: {e}") from e
    except Exception as e:
        # missing worksheet, unknown format, corrupt workbook
        raise MalformedSheetError(
            f"Could not parse sheet '{sheet_name}' in {file_path.name}: {e}"
        ) from e

    rows = df.astype(object).where(df.notna(), None).to_dict(orient="records")
    logger.debug(f"Loaded {len(rows)} rows from {file_path.name} [{sheet_name}]")
    return rows


def load_excel_dataset(data_dir: Optional[Union[str, Path]] = None) -> ExcelDataset:
    data_dir = Path(data_dir or settings.backend.data_dir)
    sources = settings.data_sources
    logger.info(f"Loading spreadsheet exports from {data_dir}")

    box_in_hand = load_excel_sheet(
        data_dir / sources.box_in_hand_file, sources.sheet_name
    )
    export_orders = load_excel_sheet(
        data_dir / sources.export_orders_file, sources.sheet_name
    )
    local_orders = load_excel_sheet(
        data_dir / sources.local_orders_file, sources.sheet_name
    )

    logger.info(
        f"Spreadsheet exports loaded: {len(box_in_hand)} boxes, "
        f"{len(export_orders)} export orders, {len(local_orders)} local orders."
    )
    return ExcelDataset(
        box_in_hand=box_in_hand,
        export_orders=export_orders,
        local_orders=local_orders,
    )
