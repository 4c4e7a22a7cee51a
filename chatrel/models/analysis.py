"""
Pydantic models for relationship analysis results.

These are the typed shapes the inference service's JSON payloads are
validated against. Field bounds are enforced at parse time, so a result
that exists always satisfies its documented ranges.

Keys travel in camelCase on the wire (``healthScore``, ``sentimentTimeline``)
and are exposed as snake_case attributes in Python.
"""

from enum import Enum

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel


class RelationshipType(str, Enum):
    """Relationship categories the model may classify a chat into."""

    FRIENDS = "Friends"
    FAMILY = "Family"
    CRUSH = "Crush"
    COUPLE = "Couple"
    UNKNOWN = "Unknown"


class Sentiment(str, Enum):
    """Overall tone reported by a quick scan."""

    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"
    MIXED = "Mixed"


class HealthBand(str, Enum):
    """Coarse bucket for the health score, used for dashboard coloring."""

    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


_WIRE_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "ignore",
}


class Subscore(BaseModel):
    """One categorized score, e.g. Emotional Tone or Responsiveness."""

    category: str
    score: float = Field(..., ge=0, le=100)
    reasoning: str

    model_config = _WIRE_CONFIG


class SentimentPoint(BaseModel):
    """A single moment on the conversation's emotional timeline."""

    index: float = Field(
        ...,
        ge=0,
        le=100,
        description="Relative position in the conversation (0 = start, 100 = end).",
    )
    sentiment: float = Field(..., ge=-100, le=100)
    label: str = Field(..., description="Two or three word label for the moment.")

    model_config = _WIRE_CONFIG


class WordCloudEntry(BaseModel):
    """A significant word, topic or emoji with its relative frequency."""

    word: str
    count: float = Field(..., ge=1, le=10)

    model_config = _WIRE_CONFIG


def health_band_for(score: float) -> HealthBand:
    """Map a 0-100 health score onto its band."""
    if score >= 80:
        return HealthBand.GOOD
    if score >= 50:
        return HealthBand.FAIR
    return HealthBand.POOR


class AnalysisResult(BaseModel):
    """
    Full relationship assessment produced by one deep-analysis call.

    Example::

        {
            "relationshipType": "Friends",
            "typeConfidence": 82,
            "healthScore": 64,
            "subscores": [{"category": "Responsiveness", "score": 40, "reasoning": "..."}],
            "sentimentTimeline": [{"index": 0, "sentiment": 55, "label": "Warm opener"}],
            "wordCloud": [{"word": "raincheck", "count": 8}],
            "keyInsights": ["Plans are repeatedly postponed by one side."],
            "summary": "...",
            "participants": ["Alice", "Bob"]
        }
    """

    relationship_type: RelationshipType
    type_confidence: float = Field(
        default=0,
        ge=0,
        le=100,
        description="Confidence in the relationship type (0-100). 0 when the model omits it.",
    )
    health_score: float = Field(..., ge=0, le=100)
    subscores: list[Subscore]
    sentiment_timeline: list[SentimentPoint]
    word_cloud: list[WordCloudEntry]
    key_insights: list[str]
    summary: str
    participants: list[str] = Field(default_factory=list)

    model_config = _WIRE_CONFIG

    @computed_field  # type: ignore[prop-decorator]
    @property
    def health_band(self) -> HealthBand:
        return health_band_for(self.health_score)


class QuickScanResult(BaseModel):
    """Low-latency pulse check: sentiment, topic and a one-line summary."""

    sentiment: Sentiment
    topic: str
    quick_summary: str = Field(..., description="One-sentence summary of the chat.")

    model_config = _WIRE_CONFIG
