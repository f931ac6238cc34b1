import json
import re
import logging
from typing import Any, Callable, Dict

from pydantic import ValidationError

from models.resume_models import (
    AnalysisResult,
    AnalyzeRequest,
    ImproveAction,
    ImproveRequest,
    ImproveResult,
)
from services.errors import AIUnavailable, InvalidRequest, MalformedAIResponse

logger = logging.getLogger(__name__)

# generate(model, prompt, params) -> text
GenerateFn = Callable[[str, str, Dict[str, Any]], str]

AUTO_IMPROVE_MESSAGE = (
    "Your resume has been automatically improved! Key enhancements: better formatting, "
    "professional language, ATS optimization, and keyword enhancement."
)

_LABEL_LINE = re.compile(r'^(text|resume|content):\s*', re.IGNORECASE)
_JSON_FENCE = re.compile(r'^```(?:json)?\s*', re.IGNORECASE)
_OPENING_FENCE = re.compile(r'^```[\w-]*[ \t]*\n?')


def build_improve_prompt(resume_text: str, role: str, area: str, action: str, command: str = None) -> str:
    if action == ImproveAction.AUTO_IMPROVE.value:
        return f"""You are a professional resume expert. Improve this resume for a {role} position in {area} field.

INSTRUCTIONS:
1. Enhance the formatting and structure
2. Make the language more professional and impactful
3. Optimize for ATS (Applicant Tracking Systems)
4. Add relevant keywords for the target role
5. Improve bullet points to be more action-oriented
6. Ensure consistent formatting throughout
7. Keep all the original information but present it better

Original Resume:
{resume_text}

Return the improved resume content directly as plain text (no JSON, no code fences, no explanations, just the improved resume text)."""

    return f"""You are a professional resume expert. The user wants you to modify their resume based on this request: "{command}"

Current resume for {role} in {area}:
{resume_text}

User's request: {command}

Apply the requested changes to the resume and return the modified resume content directly as plain text (no JSON, no code fences, no explanations, just the updated resume text)."""


def build_analysis_prompt(resume_text: str, role: str, area: str) -> str:
    return f"""Analyze this resume for a {role} position in {area}.

IMPORTANT: Return ONLY a valid JSON object with these exact fields:
- overallScore: number (0-100)
- strengths: array of strings
- improvements: array of objects with {{category, issue, suggestion, priority, section}}
- missingKeywords: array of strings
- enhancementAreas: array of strings
- contentSuggestions: array of objects with {{section, currentText, suggestedText, reason}}

Resume Content:
{resume_text}

Return only the JSON, no other text."""


def clean_improved_text(raw: str) -> str:
    """Drop code fences and a leading label such as 'Resume:' from model output"""
    text = _OPENING_FENCE.sub('', raw.strip()).replace('```', '')
    text = _LABEL_LINE.sub('', text.lstrip())
    return text.strip()


def parse_analysis(raw: str) -> AnalysisResult:
    cleaned = _JSON_FENCE.sub('', raw.strip()).replace('```', '').strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedAIResponse("AI analysis was not valid JSON", raw_text=raw, detail=str(e))

    if not isinstance(payload, dict):
        raise MalformedAIResponse("AI analysis was not a JSON object", raw_text=raw,
                                  detail=f"Got {type(payload).__name__}")
    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as e:
        raise MalformedAIResponse("AI analysis did not match the expected shape", raw_text=raw,
                                  detail=str(e))


class AIGateway:
    """
    Turns improve/analyze requests into a single generative-AI call each.

    The ``generate`` callable is the only external dependency, so tests can
    pass a fake one and count calls.
    """

    def __init__(self, generate: GenerateFn, model: str,
                 improve_params: Dict[str, Any] = None, analyze_params: Dict[str, Any] = None):
        self.generate = generate
        self.model = model
        self.improve_params = improve_params or {"temperature": 0.3, "max_output_tokens": 3000}
        self.analyze_params = analyze_params or {"temperature": 0.3, "max_output_tokens": 2000}

    def _call(self, prompt: str, params: Dict[str, Any]) -> str:
        try:
            text = self.generate(self.model, prompt, params)
        except AIUnavailable:
            raise
        except Exception as e:
            logger.error(f"Generative AI call failed: {str(e)}")
            raise AIUnavailable("AI service call failed", detail=str(e)) from e

        if not text or not text.strip():
            raise AIUnavailable("AI service call failed", detail="No response text received from AI service")
        return text

    def improve(self, request: ImproveRequest) -> ImproveResult:
        """
        Rewrite the resume, either automatically or by following a user command
        """
        if not request.resume_content or not request.action:
            raise InvalidRequest("Resume content and action are required")

        valid_actions = [a.value for a in ImproveAction]
        if request.action not in valid_actions:
            raise InvalidRequest(f"Unknown action: {request.action}",
                                 detail=f"Action must be one of: {', '.join(valid_actions)}")

        command = (request.command or "").strip()
        if request.action == ImproveAction.CHAT_COMMAND.value and not command:
            raise InvalidRequest("A command is required for chat-command")

        role = request.target_role or ""
        area = request.target_area or "general"
        logger.info(f"Processing resume improvement: {request.action} {command or 'auto-improve'}")

        prompt = build_improve_prompt(request.resume_content, role, area, request.action, command)
        raw = self._call(prompt, self.improve_params)

        if request.action == ImproveAction.AUTO_IMPROVE.value:
            message = AUTO_IMPROVE_MESSAGE
        else:
            message = f'Applied your request: "{command}". Your resume has been updated!'

        return ImproveResult(improved_content=clean_improved_text(raw), message=message)

    def analyze(self, request: AnalyzeRequest) -> AnalysisResult:
        """
        Score the resume against a target role and return the structured analysis
        """
        if not request.resume_content or not request.target_role:
            raise InvalidRequest("Resume content and target role are required")

        area = request.target_area or "general"
        logger.info(f"Analyzing resume for: {request.target_role} in {area}")

        prompt = build_analysis_prompt(request.resume_content, request.target_role, area)
        raw = self._call(prompt, self.analyze_params)

        try:
            return parse_analysis(raw)
        except MalformedAIResponse as e:
            logger.warning(f"Malformed AI analysis: {e.detail}")
            raise
