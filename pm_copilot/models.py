"""Pydantic models for signals, theme configuration and analysis results."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator


class Provenance(str, Enum):
    """Where a signal came from."""

    REACTIVE = "REACTIVE"  # support tickets
    PROACTIVE = "PROACTIVE"  # feature-board posts


# =============================================================================
# Signals
# =============================================================================


class SignalAttributes(BaseModel):
    """Provenance-specific attributes used by the scorer."""

    model_config = ConfigDict(frozen=True)

    # Reactive
    tags: List[str] = Field(default_factory=list)
    thread_count: int = 0

    # Proactive
    votes: int = 0
    comments_count: int = 0
    portal: Optional[str] = None


class Signal(BaseModel):
    """One normalized, already-redacted unit of customer feedback."""

    model_config = ConfigDict(frozen=True)

    id: str
    provenance: Provenance
    title: str = ""
    text: str = ""  # lower-cased, matching only
    created_at: Optional[datetime] = None
    attributes: SignalAttributes = Field(default_factory=SignalAttributes)

    def to_ref(self) -> "SignalRef":
        return SignalRef(id=self.id, source=self.provenance, title=self.title)


class SignalRef(BaseModel):
    """Reference to a signal in results. Never carries the text blob."""

    id: str
    source: Provenance
    title: str


# =============================================================================
# Theme configuration
# =============================================================================


class ThemeDefinition(BaseModel):
    """A configured theme.

    Single-token keywords match whole words; keywords containing a space
    match as substrings.
    """

    model_config = ConfigDict(frozen=True)

    id: StrictStr
    label: StrictStr
    category: StrictStr = "general"
    keywords: List[StrictStr]

    @field_validator("keywords")
    @classmethod
    def keywords_not_blank(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("theme must define at least one keyword")
        for keyword in v:
            if not keyword.strip():
                raise ValueError("keywords must be non-empty strings")
        return v


class ThemesConfig(BaseModel):
    """Validated theme configuration, passed into every analysis call."""

    model_config = ConfigDict(frozen=True)

    version: int = 1
    themes: List[ThemeDefinition]
    stop_words: List[StrictStr] = Field(default_factory=list)
    emerging_theme_min_frequency: int = Field(default=3, ge=1)

    @model_validator(mode="after")
    def theme_ids_unique(self) -> "ThemesConfig":
        seen = set()
        for theme in self.themes:
            if theme.id in seen:
                raise ValueError(f"duplicate theme id: {theme.id}")
            seen.add(theme.id)
        return self


# =============================================================================
# Results
# =============================================================================


class ThemeResult(BaseModel):
    """Scored theme with at least one matching signal."""

    theme_id: str
    label: str
    category: str
    reactive_count: int
    proactive_count: int
    convergent: bool
    frequency_score: float
    severity_score: float
    vote_momentum_score: float
    priority_score: float
    data_points: List[SignalRef] = Field(default_factory=list)


class EmergingTheme(BaseModel):
    """Recurring phrase across signals that matched no configured theme."""

    ngram: str
    frequency: int
    data_points: List[SignalRef] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """Full output of one analysis run."""

    config_version: int
    known_themes_count: int
    total_data_points: int
    reactive_count: int
    proactive_count: int
    themes: List[ThemeResult] = Field(default_factory=list)
    emerging_themes: List[EmergingTheme] = Field(default_factory=list)
    unmatched_count: int = 0
