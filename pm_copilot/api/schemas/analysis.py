"""
Analysis API Schemas

Pydantic models for synthesis and product-plan requests.

Record payloads are deliberately permissive: every field except the id is
optional, and sparse records degrade to empty values during analysis
instead of failing validation.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


DetailLevelParam = Literal["summary", "standard", "full"]


class TicketPayload(BaseModel):
    """Support conversation as produced by the ticket-system client."""

    id: Union[str, int]
    number: Optional[int] = None
    subject: Optional[str] = None
    preview: Optional[str] = None
    customer_messages: List[str] = Field(default_factory=list)
    tags: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    thread_count: Optional[int] = None
    customer_email: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[Union[datetime, str]] = None
    closed_at: Optional[Union[datetime, str]] = None


class FeatureCommentPayload(BaseModel):
    """Comment on a feature-board post."""

    comment: Optional[str] = None
    author: Optional[Union[str, Dict[str, Any]]] = None
    role: Optional[str] = None
    created_at: Optional[Union[datetime, str]] = None


class FeatureRequestPayload(BaseModel):
    """Feature-board post as produced by the feature-board client."""

    id: Union[str, int]
    title: Optional[str] = None
    description: Optional[str] = None
    votes_count: Optional[int] = None
    comments_count: Optional[int] = None
    comments: List[FeatureCommentPayload] = Field(default_factory=list)
    portal: Optional[str] = None
    status: Optional[Union[str, Dict[str, Any]]] = None
    category: Optional[Union[str, Dict[str, Any]]] = None
    created_at: Optional[Union[datetime, str]] = None
    updated_at: Optional[Union[datetime, str]] = None


class SynthesizeRequest(BaseModel):
    """Request to synthesize feedback into scored themes."""

    tickets: List[TicketPayload] = Field(
        default_factory=list,
        description="Support conversations (unredacted; redaction runs server-side)"
    )
    feature_requests: List[FeatureRequestPayload] = Field(
        default_factory=list,
        description="Feature-board posts with comments"
    )
    detail_level: DetailLevelParam = Field(
        default="summary",
        description="summary (compact), standard (adds titles), full (everything)"
    )


class ProductPlanRequest(SynthesizeRequest):
    """Request to build a ranked product plan."""

    max_priorities: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Number of priorities to return"
    )
    kpi_context: Optional[str] = Field(
        default=None,
        description="Free-text business metrics, included verbatim in the plan"
    )
    preview_only: bool = Field(
        default=False,
        description="Describe what would be analyzed without processing content"
    )


class SynthesizeResponse(BaseModel):
    """Trimmed analysis plus the PII audit fields."""

    detail_level: DetailLevelParam
    analyzed_at: datetime
    data_sources: List[str]
    pii_scrubbing_applied: bool = True
    pii_categories_redacted: List[str] = Field(default_factory=list)
    analysis: Dict[str, Any]


class MethodologyResponse(BaseModel):
    """Versioned planning methodology."""

    version: str
    content: str
