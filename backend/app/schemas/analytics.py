"""Reporting view schemas (trends, monthly rollups, department comparison)."""
from app.schemas.common import CamelModel


class TrendPoint(CamelModel):
    date: str  # YYYY-MM-DD
    count: int
    avg_rating: float


class MonthlyPoint(CamelModel):
    month: str  # YYYY-MM
    count: int
    avg_rating: float


class DepartmentComparison(CamelModel):
    department: str
    avg_rating: float
    total_feedback: int
