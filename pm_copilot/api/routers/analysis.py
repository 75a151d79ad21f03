"""
Analysis Endpoints

Synthesize customer feedback into scored themes and build product plans.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from pm_copilot.analyzer import AnalysisReport, analyze_feedback
from pm_copilot.api.deps import get_themes_config
from pm_copilot.api.schemas.analysis import (
    MethodologyResponse,
    ProductPlanRequest,
    SynthesizeRequest,
    SynthesizeResponse,
)
from pm_copilot.methodology import METHODOLOGY_CONTENT, METHODOLOGY_VERSION
from pm_copilot.models import ThemesConfig
from pm_copilot.records import FeatureRequestRecord, TicketRecord
from pm_copilot.reporting import build_data_preview, build_product_plan, trim_analysis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])


def _run_analysis(request: SynthesizeRequest, config: ThemesConfig) -> AnalysisReport:
    """Convert payloads to records and analyze them."""
    tickets = [TicketRecord.from_dict(t.model_dump()) for t in request.tickets]
    feature_requests = [
        FeatureRequestRecord.from_dict(r.model_dump()) for r in request.feature_requests
    ]
    return analyze_feedback(tickets, feature_requests, config)


@router.post("/analysis/synthesize", response_model=SynthesizeResponse)
def synthesize_feedback(
    request: SynthesizeRequest,
    config: ThemesConfig = Depends(get_themes_config),
):
    """
    Cross-reference support tickets and feature requests.

    Returns theme-matched analysis with priority scores. Themes that appear
    in both sources get a 2x priority boost.

    **Detail levels:**
    - summary: scores, quotes, evidence summaries
    - standard: adds sub-scores and data point titles
    - full: every data point
    """
    report = _run_analysis(request, config)
    return SynthesizeResponse(
        detail_level=request.detail_level,
        analyzed_at=datetime.now(timezone.utc),
        data_sources=report.data_sources,
        pii_categories_redacted=report.pii_categories_redacted,
        analysis=trim_analysis(report, request.detail_level),
    )


@router.post("/analysis/plan")
def generate_product_plan(
    request: ProductPlanRequest,
    config: ThemesConfig = Depends(get_themes_config),
) -> Dict[str, Any]:
    """
    Build a prioritized product plan.

    With preview_only, returns what would be analyzed (counts, fields, PII
    handling) without processing any record content.
    """
    if request.preview_only:
        return build_data_preview(
            ticket_count=len(request.tickets),
            feature_request_count=len(request.feature_requests),
            kpi_context=request.kpi_context,
        )

    report = _run_analysis(request, config)
    return build_product_plan(
        report,
        max_priorities=request.max_priorities,
        detail_level=request.detail_level,
        kpi_context=request.kpi_context,
    )


@router.get("/methodology", response_model=MethodologyResponse)
def get_methodology():
    """Planning methodology: signal weighting and the convergence boost."""
    return MethodologyResponse(version=METHODOLOGY_VERSION, content=METHODOLOGY_CONTENT)
