"""
kneeklinic/services/xray_service.py

Purpose: AI X-ray analysis

- Validates and uploads a knee X-ray for KL grading
- Lists past analyses
- KL grade reference information
"""

from pathlib import Path
from typing import List, Optional, Union

from kneeklinic.core.errors import parse_response
from kneeklinic.core.exceptions import ValidationError
from kneeklinic.core.logging import get_logger
from kneeklinic.schemas.xray import AIAnalysis, AnalysisResponse, AnalysesResponse, KLGradeInfo
from kneeklinic.services.api_client import ApiClient
from kneeklinic.utils.constants import KL_GRADE_INFO, KL_GRADE_UNKNOWN, XRAY_UPLOAD_FIELD
from kneeklinic.utils.validation_utils import check_image_file, guess_image_content_type

logger = get_logger(__name__)


def get_kl_grade_info(grade: Union[str, int, None]) -> KLGradeInfo:
    """
    Reference label, description and recommendations for a KL grade.

    Args:
        grade: KL grade as returned by the backend ("0".."4") or an int

    Returns:
        KLGradeInfo; grade is None and the label "Unknown" for anything else
    """
    try:
        grade_num = int(grade)
    except (TypeError, ValueError):
        grade_num = None

    info = KL_GRADE_INFO.get(grade_num)
    if info is None:
        return KLGradeInfo(grade=None, **KL_GRADE_UNKNOWN)
    return KLGradeInfo(grade=grade_num, **info)


class XRayService:
    """Service for the /ai endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def analyze_xray(self, image_path: Optional[Path]) -> AIAnalysis:
        """
        Uploads an X-ray image and returns the AI analysis.

        Raises:
            ValidationError: If no file is selected, or it is too large or not an image
        """
        error = check_image_file(image_path)
        if error:
            raise ValidationError(error, details={"xray": error})

        image_path = Path(image_path)
        files = {
            XRAY_UPLOAD_FIELD: (
                image_path.name,
                image_path.read_bytes(),
                guess_image_content_type(image_path.name),
            )
        }

        logger.info(f"Uploading X-ray {image_path.name}")
        data = await self.client.post("ai/analyze-xray", files=files)
        analysis = parse_response(AnalysisResponse, data).analysis
        logger.info(
            f"X-ray analyzed: KL grade {analysis.kl_grade} ({analysis.severity})",
            extra={"analysis_id": analysis.id}
        )
        return analysis

    async def get_analyses(self) -> List[AIAnalysis]:
        data = await self.client.get("ai/analyses")
        return parse_response(AnalysesResponse, data).analyses

    async def get_analysis_by_id(self, analysis_id: str) -> AIAnalysis:
        data = await self.client.get(f"ai/analyses/{analysis_id}")
        return parse_response(AnalysisResponse, data).analysis
