from datetime import datetime
from pydantic import Field
from typing import Optional, List

from kneeklinic.schemas.response import ApiModel


class SeverityCount(ApiModel):
    id: str = Field(..., alias="_id")
    count: int = 0


class DashboardStats(ApiModel):
    total_analyses: int = 0
    avg_risk_score: float = 0
    severity_distribution: List[SeverityCount] = []


class RecentAnalysis(ApiModel):
    id: str
    kl_grade: str
    severity: str
    risk_score: float
    oa_status: bool
    analysis_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class DashboardData(ApiModel):
    stats: DashboardStats = DashboardStats()
    recent_analyses: List[RecentAnalysis] = []
