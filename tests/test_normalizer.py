"""Tests for parsing and validating model payloads."""

import json

import pytest

from chatrel.engine.errors import MalformedResponseError
from chatrel.engine.normalizer import parse_analysis, parse_quick_scan
from chatrel.models.analysis import HealthBand, RelationshipType, Sentiment

from conftest import analysis_payload, quick_scan_payload


class TestParseAnalysis:
    def test_valid_payload(self, analysis_json):
        result = parse_analysis(analysis_json)
        assert result.relationship_type is RelationshipType.FRIENDS
        assert result.health_score == 64
        assert [s.category for s in result.subscores] == ["Emotional Tone", "Responsiveness"]
        assert [p.index for p in result.sentiment_timeline] == [0, 50, 100]
        assert result.word_cloud[0].word == "raincheck"
        assert result.participants == ["Alice", "Bob"]

    def test_not_json(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_analysis("{not json")
        assert exc_info.value.raw_text == "{not json"

    def test_empty_text(self):
        with pytest.raises(MalformedResponseError):
            parse_analysis("   ")

    def test_json_array_instead_of_object(self):
        with pytest.raises(MalformedResponseError):
            parse_analysis("[]")

    def test_missing_required_field(self):
        payload = analysis_payload()
        del payload["sentimentTimeline"]
        with pytest.raises(MalformedResponseError):
            parse_analysis(json.dumps(payload))

    def test_wrong_type(self):
        with pytest.raises(MalformedResponseError):
            parse_analysis(json.dumps(analysis_payload(keyInsights="not a list")))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"healthScore": 101},
            {"healthScore": -1},
            {"typeConfidence": 150},
            {"subscores": [{"category": "Tone", "score": 120, "reasoning": "x"}]},
            {"sentimentTimeline": [{"index": 0, "sentiment": -101, "label": "x"}]},
            {"sentimentTimeline": [{"index": 101, "sentiment": 0, "label": "x"}]},
            {"wordCloud": [{"word": "hi", "count": 0}]},
        ],
    )
    def test_out_of_range_values_rejected(self, overrides):
        with pytest.raises(MalformedResponseError):
            parse_analysis(json.dumps(analysis_payload(**overrides)))

    def test_word_cloud_entries_keyed_by_count(self):
        result = parse_analysis(json.dumps(analysis_payload(wordCloud=[{"word": "busy", "count": 7}])))
        assert result.word_cloud[0].count == 7
        assert result.model_dump(by_alias=True)["wordCloud"] == [{"word": "busy", "count": 7}]

        with pytest.raises(MalformedResponseError):
            parse_analysis(json.dumps(analysis_payload(wordCloud=[{"word": "busy", "weight": 7}])))

    def test_unknown_relationship_type(self):
        with pytest.raises(MalformedResponseError):
            parse_analysis(json.dumps(analysis_payload(relationshipType="Coworkers")))

    def test_optional_fields_default(self):
        payload = analysis_payload()
        del payload["typeConfidence"]
        del payload["participants"]
        result = parse_analysis(json.dumps(payload))
        assert result.type_confidence == 0
        assert result.participants == []

    def test_code_fence_stripped(self, analysis_json):
        result = parse_analysis(f"```json\n{analysis_json}\n```")
        assert result.summary.startswith("A friendship")

    def test_camel_case_round_trip(self, analysis_json):
        dumped = parse_analysis(analysis_json).model_dump(by_alias=True)
        assert dumped["healthScore"] == 64
        assert dumped["relationshipType"] == "Friends"


class TestHealthBand:
    @pytest.mark.parametrize(
        "score, band",
        [(100, HealthBand.GOOD), (80, HealthBand.GOOD), (79.9, HealthBand.FAIR),
         (50, HealthBand.FAIR), (49, HealthBand.POOR), (0, HealthBand.POOR)],
    )
    def test_bands(self, score, band):
        result = parse_analysis(json.dumps(analysis_payload(healthScore=score)))
        assert result.health_band is band


class TestParseQuickScan:
    def test_valid_payload(self, quick_scan_json):
        result = parse_quick_scan(quick_scan_json)
        assert result.sentiment is Sentiment.MIXED
        assert result.topic == "Cancelled dinner plans"
        assert result.quick_summary.startswith("Bob cancels")

    def test_unknown_sentiment(self):
        with pytest.raises(MalformedResponseError):
            parse_quick_scan(json.dumps(quick_scan_payload(sentiment="Ecstatic")))

    def test_missing_summary(self):
        payload = quick_scan_payload()
        del payload["quickSummary"]
        with pytest.raises(MalformedResponseError):
            parse_quick_scan(json.dumps(payload))
