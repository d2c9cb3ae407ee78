"""
Data loader for consumption figures.
Reads a consumption table from an Excel workbook or a CSV file.
"""

import logging
import math
import pandas as pd
from pathlib import Path
from typing import List, Optional

from .models import FuelEconomy, VehicleType
from .providers import ConsumptionDataProvider, ProviderError

log = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('vehicle type', 'city l/100km', 'highway l/100km')


class DataLoader(ConsumptionDataProvider):
    """Load consumption data from a local table instead of asking the model."""

    def __init__(self, path: str, sheet_name: str = 'Consumption'):
        """
        Initialize data loader with a workbook or CSV file.

        Args:
            path: Path to an .xlsx/.xls workbook or a .csv file
            sheet_name: Sheet holding the consumption table (workbooks only)
        """
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Consumption file not found: {path}")

        self.sheet_name = sheet_name
        self._load_all_data()

    def _load_all_data(self):
        """Load the consumption table."""
        if self.path.suffix.lower() == '.csv':
            self.consumption = pd.read_csv(self.path)
        else:
            self.consumption = pd.read_excel(self.path, sheet_name=self.sheet_name)

        self._clean_column_names()

        missing = [col for col in REQUIRED_COLUMNS if col not in self.consumption.columns]
        if missing:
            raise ValueError(f"Consumption table is missing columns: {', '.join(missing)}")

    def _clean_column_names(self):
        """Standardize column names."""
        self.consumption.columns = self.consumption.columns.str.strip().str.lower()

    def get_vehicle(self, vehicle_type: VehicleType) -> Optional[FuelEconomy]:
        """
        Get consumption data for one variant.

        Args:
            vehicle_type: Variant to look up

        Returns:
            FuelEconomy, or None if the table has no row for it
        """
        for economy in self.fetch():
            if economy.vehicle_type == vehicle_type:
                return economy
        return None

    def fetch(self) -> List[FuelEconomy]:
        economies = []
        for _, row in self.consumption.iterrows():
            try:
                vehicle_type = VehicleType.parse(row['vehicle type'])
            except ValueError:
                log.warning("Skipping unknown vehicle type %r in %s", row['vehicle type'], self.path)
                continue

            city_kwh = 0.0
            if vehicle_type == VehicleType.PHEV and not pd.isna(row.get('city kwh/100km')):
                city_kwh = self._consumption_value(row, 'city kwh/100km', vehicle_type)
            name = row.get('name')
            if pd.isna(name) or not str(name).strip():
                name = vehicle_type.display_name

            economies.append(FuelEconomy(
                name=str(name).strip(),
                vehicle_type=vehicle_type,
                city_l_per_100km=self._consumption_value(row, 'city l/100km', vehicle_type),
                highway_l_per_100km=self._consumption_value(row, 'highway l/100km', vehicle_type),
                city_kwh_per_100km=city_kwh,
            ))
        return economies

    def _consumption_value(self, row: pd.Series, column: str, vehicle_type: VehicleType) -> float:
        """Read one consumption cell; blank, text or negative cells fail the whole fetch."""
        raw = row.get(column)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            value = float('nan')

        if not math.isfinite(value) or value < 0:
            log.error("Invalid %r for %s in %s: %r", column, vehicle_type.value, self.path, raw)
            raise ProviderError(
                f"Invalid consumption value for {vehicle_type.display_name} "
                f"in column '{column}' of {self.path.name}."
            )
        return value

    def list_vehicles(self) -> list:
        """Get list of vehicle names in the table."""
        return [economy.name for economy in self.fetch()]
