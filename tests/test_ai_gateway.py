"""
Tests for the AI improvement/analysis gateway, using a fake generate callable.
"""

import json

import pytest

from models.resume_models import AnalyzeRequest, ImproveRequest
from services.ai_gateway import (
    AUTO_IMPROVE_MESSAGE,
    build_improve_prompt,
    clean_improved_text,
    parse_analysis,
)
from services.errors import AIUnavailable, InvalidRequest, MalformedAIResponse


def improve_request(**overrides):
    data = {
        "resumeContent": "JANE DOE\nEngineer",
        "targetRole": "software engineer",
        "targetArea": "fintech",
        "action": "auto-improve",
    }
    data.update(overrides)
    return ImproveRequest.model_validate(data)


def analyze_request(**overrides):
    data = {"resumeContent": "JANE DOE\nEngineer", "targetRole": "software engineer"}
    data.update(overrides)
    return AnalyzeRequest.model_validate(data)


class TestImproveValidation:

    def test_empty_resume_fails_without_calling_ai(self, gateway, fake_generate):
        with pytest.raises(InvalidRequest):
            gateway.improve(improve_request(resumeContent=""))
        assert fake_generate.call_count == 0

    def test_missing_action_fails_without_calling_ai(self, gateway, fake_generate):
        with pytest.raises(InvalidRequest):
            gateway.improve(improve_request(action=None))
        assert fake_generate.call_count == 0

    def test_unknown_action(self, gateway, fake_generate):
        with pytest.raises(InvalidRequest) as exc_info:
            gateway.improve(improve_request(action="rewrite-everything"))
        assert "auto-improve" in exc_info.value.detail
        assert fake_generate.call_count == 0

    def test_chat_command_requires_command(self, gateway, fake_generate):
        with pytest.raises(InvalidRequest):
            gateway.improve(improve_request(action="chat-command", command="   "))
        assert fake_generate.call_count == 0


class TestImprove:

    def test_auto_improve(self, gateway, fake_generate):
        fake_generate.response = "```\nResume: JANE DOE\nSenior Engineer\n```"
        result = gateway.improve(improve_request())

        assert result.improved_content == "JANE DOE\nSenior Engineer"
        assert result.message == AUTO_IMPROVE_MESSAGE
        assert fake_generate.call_count == 1

        call = fake_generate.calls[0]
        assert call["model"] == "test-model"
        assert call["params"] == {"temperature": 0.3, "max_output_tokens": 3000}
        assert "software engineer position in fintech field" in call["prompt"]
        assert "Optimize for ATS" in call["prompt"]
        assert "JANE DOE\nEngineer" in call["prompt"]

    def test_chat_command(self, gateway, fake_generate):
        fake_generate.response = "JANE DOE\nEngineer\nSKILLS\n- Python"
        result = gateway.improve(improve_request(action="chat-command", command="Add a skills section"))

        assert result.improved_content == "JANE DOE\nEngineer\nSKILLS\n- Python"
        assert result.message == 'Applied your request: "Add a skills section". Your resume has been updated!'
        assert '"Add a skills section"' in fake_generate.calls[0]["prompt"]

    def test_area_defaults_to_general(self, gateway, fake_generate):
        fake_generate.response = "ok"
        gateway.improve(improve_request(targetArea=None))
        assert "in general field" in fake_generate.calls[0]["prompt"]

    def test_service_error_becomes_ai_unavailable(self, gateway, fake_generate):
        fake_generate.error = RuntimeError("quota exceeded")
        with pytest.raises(AIUnavailable) as exc_info:
            gateway.improve(improve_request())
        assert exc_info.value.detail == "quota exceeded"

    @pytest.mark.parametrize("response", ["", "   \n", None])
    def test_empty_response_is_ai_unavailable(self, gateway, fake_generate, response):
        fake_generate.response = response
        with pytest.raises(AIUnavailable):
            gateway.improve(improve_request())


class TestCleanImprovedText:

    @pytest.mark.parametrize("raw, expected", [
        ("TEXT: Jane Doe", "Jane Doe"),
        ("content:Jane", "Jane"),
        ("```\nJane\n```", "Jane"),
        ("```text\nJANE DOE\n```", "JANE DOE"),
        ("```plaintext\nJANE DOE\nEngineer\n```", "JANE DOE\nEngineer"),
        ("  Jane\nResume: stays  ", "Jane\nResume: stays"),
    ])
    def test_clean(self, raw, expected):
        assert clean_improved_text(raw) == expected

    def test_prompts_forbid_fences(self):
        for action in ("auto-improve", "chat-command"):
            prompt = build_improve_prompt("text", "role", "area", action, "do it")
            assert "no code fences" in prompt


class TestAnalyze:

    def test_fenced_json_is_parsed(self, gateway, fake_generate, valid_analysis):
        fake_generate.response = "```json\n" + json.dumps(valid_analysis) + "\n```"
        result = gateway.analyze(analyze_request())

        assert result.overall_score == 80
        assert result.missing_keywords == ["Docker", "AWS"]
        assert result.improvements[0].priority == "high"
        assert result.content_suggestions[0].suggested_text.startswith("Backend engineer")
        assert fake_generate.calls[0]["params"] == {"temperature": 0.3, "max_output_tokens": 2000}

    def test_prompt_requests_json_only(self, gateway, fake_generate, valid_analysis):
        fake_generate.response = json.dumps(valid_analysis)
        gateway.analyze(analyze_request(targetArea="healthcare"))
        prompt = fake_generate.calls[0]["prompt"]
        assert "software engineer position in healthcare" in prompt
        assert "Return ONLY a valid JSON object" in prompt
        for field in valid_analysis:
            assert field in prompt

    @pytest.mark.parametrize("field", ["resumeContent", "targetRole"])
    def test_missing_required_field(self, gateway, fake_generate, field):
        with pytest.raises(InvalidRequest):
            gateway.analyze(analyze_request(**{field: ""}))
        assert fake_generate.call_count == 0

    def test_non_json_is_malformed(self, gateway, fake_generate):
        fake_generate.response = "This resume looks great overall!"
        with pytest.raises(MalformedAIResponse) as exc_info:
            gateway.analyze(analyze_request())
        assert exc_info.value.raw_text == "This resume looks great overall!"

    def test_call_failure_is_ai_unavailable(self, gateway, fake_generate):
        fake_generate.error = ConnectionError("unreachable")
        with pytest.raises(AIUnavailable):
            gateway.analyze(analyze_request())


class TestParseAnalysis:

    def test_json_array_is_malformed(self):
        with pytest.raises(MalformedAIResponse):
            parse_analysis("[1, 2, 3]")

    def test_missing_field_is_malformed(self, valid_analysis):
        payload = dict(valid_analysis)
        del payload["strengths"]
        with pytest.raises(MalformedAIResponse) as exc_info:
            parse_analysis(json.dumps(payload))
        assert "strengths" in exc_info.value.detail

    def test_score_out_of_range_is_malformed(self, valid_analysis):
        payload = dict(valid_analysis, overallScore=140)
        with pytest.raises(MalformedAIResponse):
            parse_analysis(json.dumps(payload))

    def test_bare_fence(self, valid_analysis):
        assert parse_analysis("```\n" + json.dumps(valid_analysis) + "\n```").overall_score == 80

    @pytest.mark.parametrize("score", [True, "80", 80.5])
    def test_score_is_not_coerced(self, valid_analysis, score):
        payload = dict(valid_analysis, overallScore=score)
        with pytest.raises(MalformedAIResponse):
            parse_analysis(json.dumps(payload))

    def test_non_string_keyword_is_malformed(self, valid_analysis):
        payload = dict(valid_analysis, missingKeywords=["Docker", 7])
        with pytest.raises(MalformedAIResponse):
            parse_analysis(json.dumps(payload))
