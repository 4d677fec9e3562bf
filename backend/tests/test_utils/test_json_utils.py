"""Tests for model-output JSON extraction and coercion."""
import pytest

from app.utils.json_utils import (
    coerce_quality,
    coerce_recommendations,
    coerce_sentiment,
    coerce_summary,
    coerce_templates,
    extract_json_object,
    safe_parse_json,
    sanitize_llm_output,
)


class TestSanitize:
    def test_strips_reasoning_and_fences(self):
        raw = '<think>let me see</think>\n```json\n{"a": 1}\n```'
        assert sanitize_llm_output(raw) == '{"a": 1}'

    def test_unclosed_reasoning_block(self):
        assert sanitize_llm_output('{"a": 1}<think>trailing') == '{"a": 1}'

    def test_empty(self):
        assert sanitize_llm_output("") == ""


class TestExtractJsonObject:
    def test_ignores_braces_in_strings(self):
        text = 'Sure! {"summary": "uses {curly} braces", "n": 2} hope that helps'
        assert extract_json_object(text) == '{"summary": "uses {curly} braces", "n": 2}'

    def test_unbalanced(self):
        assert extract_json_object('{"a": 1') is None
        assert extract_json_object("no json") is None


class TestSafeParseJson:
    def test_direct(self):
        result = safe_parse_json('{"score": 3}')
        assert result.ok and result.method == "direct"

    def test_extraction(self):
        result = safe_parse_json('Here you go: {"score": 3} done')
        assert result.ok and result.method == "extraction"
        assert result.data == {"score": 3}

    def test_non_object_is_failure(self):
        assert not safe_parse_json("[1, 2, 3]").ok
        assert safe_parse_json("nothing").method == "failed"


class TestCoercion:
    def test_sentiment(self):
        out = coerce_sentiment({"sentiment": "NEGATIVE", "score": -3, "keywords": ["slow", "", 4, None]})
        assert out == {"sentiment": "negative", "score": -1.0, "keywords": ["slow", "4"]}

    @pytest.mark.parametrize("data", [{"sentiment": "great", "score": 0}, {"sentiment": "neutral", "score": "high"}])
    def test_sentiment_invalid(self, data):
        with pytest.raises(ValueError):
            coerce_sentiment(data)

    def test_quality_bounds(self):
        assert coerce_quality({"score": 0})["score"] == 1
        assert coerce_quality({"score": 7.6, "reasoning": " good "}) == {"score": 8, "reasoning": "good"}
        with pytest.raises(ValueError):
            coerce_quality({"score": True})

    def test_summary_accepts_both_key_styles(self):
        assert coerce_summary({"summary": "x", "overall_sentiment": "positive"})["overall_sentiment"] == "positive"
        assert coerce_summary({"summary": "x", "overallSentiment": "weird"})["overall_sentiment"] == "neutral"
        with pytest.raises(ValueError):
            coerce_summary({"strengths": []})

    def test_recommendations_capped_at_three(self):
        items = [{"teacherId": f"t{i}", "score": 50 + i, "reasoning": "r"} for i in range(5)]
        out = coerce_recommendations({"recommendations": items}, {f"t{i}" for i in range(5)})
        assert [r["teacher_id"] for r in out] == ["t0", "t1", "t2"]
        with pytest.raises(ValueError):
            coerce_recommendations({"recommendations": "t1"}, {"t1"})

    def test_templates(self):
        assert coerce_templates({"templates": ["a", "b", "c", "d"]}) == ["a", "b", "c"]
        with pytest.raises(ValueError):
            coerce_templates({"replies": ["a"]})
