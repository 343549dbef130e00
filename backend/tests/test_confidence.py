import math

from models.schemas.extraction import ExtractionMethod, ExtractionResult
from models.schemas.structured_request import LocationRequirement, StructuredRequest
from services import confidence


class TestAggregate:
    def test_empty_map_scores_zero(self):
        assert confidence.aggregate({}) == 0.0

    def test_unweighted_mean(self):
        assert confidence.aggregate({"a": 0.9, "b": 0.7}) == 0.8

    def test_result_in_unit_interval(self):
        assert 0.0 <= confidence.aggregate({"a": 1.0, "b": 0.0, "c": 0.33}) <= 1.0


class TestClamp:
    def test_clamp(self):
        assert confidence.clamp(1.5) == 1.0
        assert confidence.clamp(-0.2) == 0.0
        assert confidence.clamp(math.nan) == 0.0
        assert confidence.clamp(0.456) == 0.46


class TestEvaluateField:
    def test_null_and_sentinel_score_zero(self):
        assert confidence.evaluate_field(None, ExtractionMethod.REGEX) == 0.0
        assert confidence.evaluate_field("N/A", ExtractionMethod.REGEX) == 0.0
        assert confidence.evaluate_field([], ExtractionMethod.PATTERN) == 0.0

    def test_method_base_confidence(self):
        assert confidence.evaluate_field("x", ExtractionMethod.REGEX) == 0.9
        assert confidence.evaluate_field("x", "pattern") == 0.85
        assert confidence.evaluate_field("x", "hybrid") == 0.8
        assert confidence.evaluate_field("x", "nlp") == 0.7

    def test_unknown_method(self):
        assert confidence.evaluate_field("x", "guess") == 0.5


class TestCombineResults:
    def test_corroborated_result_is_boosted(self):
        combined = confidence.combine_results([
            ExtractionResult(value="a", confidence=0.8, method=ExtractionMethod.PATTERN),
            ExtractionResult(value="b", confidence=0.75, method=ExtractionMethod.REGEX),
        ])
        assert combined.value == "a"
        assert combined.confidence == 0.9
        assert combined.method == ExtractionMethod.HYBRID

    def test_weak_runner_up_does_not_boost(self):
        combined = confidence.combine_results([
            ExtractionResult(value="b", confidence=0.6, method=ExtractionMethod.REGEX),
            ExtractionResult(value="a", confidence=0.8, method=ExtractionMethod.PATTERN),
        ])
        assert combined.value == "a"
        assert combined.confidence == 0.8
        assert combined.method == ExtractionMethod.PATTERN

    def test_boost_capped_at_one(self):
        combined = confidence.combine_results([
            ExtractionResult(value="a", confidence=0.95),
            ExtractionResult(value="b", confidence=0.9),
        ])
        assert combined.confidence == 1.0

    def test_zero_confidence_attempts_ignored(self):
        combined = confidence.combine_results([ExtractionResult.empty(), ExtractionResult.empty()])
        assert combined.value is None
        assert combined.confidence == 0.0


class TestFinalize:
    def test_text_leaves_get_sentinel(self):
        request = StructuredRequest(
            role=None,
            industry="  ",
            team_size=None,
            location=LocationRequirement(work_type=None, regions=["RU"]),
        )
        final = confidence.finalize(request)
        assert final.role == "N/A"
        assert final.industry == "N/A"
        assert final.location.work_type == "N/A"
        assert final.location.regions == ["RU"]

    def test_non_text_leaves_stay_none(self):
        final = confidence.finalize(StructuredRequest())
        assert final.team_size is None
        assert final.deadline is None

    def test_values_are_kept(self):
        final = confidence.finalize(StructuredRequest(role=" QA Engineer "))
        assert final.role == "QA Engineer"


def test_extraction_result_clamps_confidence():
    assert ExtractionResult(confidence=3).confidence == 1.0
    assert ExtractionResult(confidence="bad").confidence == 0.0
    assert ExtractionResult(value=" -- ").value is None
