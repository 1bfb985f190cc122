from datetime import datetime
from pydantic import Field
from typing import Optional, List, Literal

from kneeklinic.schemas.response import ApiModel

KLGrade = Literal["0", "1", "2", "3", "4"]
Severity = Literal["Normal", "Minimal", "Moderate", "Severe", "Very Severe"]


class AIAnalysis(ApiModel):
    """
    Result of the remote AI model on one knee X-ray.

    kl_grade is the Kellgren-Lawrence score (0-4) as a string, the way the
    backend stores it.
    """

    id: str = Field(..., alias="_id")
    patient_id: str
    xray_image_url: str
    kl_grade: KLGrade
    severity: Severity
    risk_score: float
    oa_status: bool
    grad_cam_url: Optional[str] = None
    recommendations: List[str] = []
    analysis_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class KLGradeInfo(ApiModel):
    grade: Optional[int] = None
    label: str
    description: str
    recommendations: List[str]


class AnalysisResponse(ApiModel):
    analysis: AIAnalysis
    message: Optional[str] = None


class AnalysesResponse(ApiModel):
    analyses: List[AIAnalysis] = []
