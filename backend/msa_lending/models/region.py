from typing import Optional

from pydantic import BaseModel


class RegionIncomeRecord(BaseModel):
    region_id: str
    region_name: str
    avg_household_income: Optional[float] = None


class RegionSelection(BaseModel):
    """Regions that passed the income filter, in source order."""
    regions_under_threshold: list[tuple[str, str]] = []
    region_name_by_id: dict[str, str] = {}

    @property
    def region_ids(self) -> list[str]:
        return [region_id for region_id, _ in self.regions_under_threshold]
