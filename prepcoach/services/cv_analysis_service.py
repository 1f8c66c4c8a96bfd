"""
CV analysis: extracts skills, experience highlights, education and a summary.

Uses the LLM if available, otherwise falls back to rule-based extraction.
"""
import logging
import re
from typing import Any, Dict, List, Optional

from prepcoach.llm.provider import LLMProvider
from prepcoach.llm.parsing import parse_json_payload
from prepcoach.llm.router import get_model_for_feature, get_temperature_for_feature
from prepcoach.schemas.evaluation import CVAnalysisResponse

logger = logging.getLogger(__name__)

FEATURE = "cv_analysis"

SKILL_KEYWORDS = [
    "python", "java", "javascript", "typescript", "react", "node", "django", "fastapi", "flask",
    "sql", "postgresql", "mongodb", "redis", "aws", "azure", "gcp", "docker", "kubernetes",
    "git", "linux", "c++", "c#", "golang", "rust", "machine learning", "pandas", "graphql",
]
EDUCATION_WORDS = (
    "university", "college", "bachelor", "master", "phd", "degree", "b.sc", "m.sc",
    "üniversite", "lisans", "yüksek lisans",
)
_YEAR_RANGE_RE = re.compile(
    r"\b(19|20)\d{2}\s*[-–]\s*((19|20)\d{2}|present|current|now|günümüz)\b",
    re.IGNORECASE,
)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if isinstance(item, (str, int, float)) and str(item).strip()]


def _find_skills(text_lower: str) -> List[str]:
    found = []
    for keyword in SKILL_KEYWORDS:
        # Word-ish boundaries so "java" doesn't match "javascript"
        if re.search(rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])", text_lower):
            found.append(keyword)
    return found


class CVAnalysisService:
    def __init__(self, provider: Optional[LLMProvider] = None):
        self.provider = provider

    def analyze(self, cv_text: str, position: str) -> CVAnalysisResponse:
        if self.provider is not None:
            try:
                return self._analyze_with_llm(cv_text, position)
            except Exception as e:
                logger.warning(f"LLM CV analysis failed, using rule-based fallback: {type(e).__name__}: {e}")

        logger.info("Using rule-based CV analysis")
        return self._analyze_rule_based(cv_text, position)

    def _analyze_with_llm(self, cv_text: str, position: str) -> CVAnalysisResponse:
        response = self.provider.chat(
            messages=[
                {
                    "role": "system",
                    "content": "You are an expert HR professional analyzing CVs. Extract key information in a structured format.",
                },
                {
                    "role": "user",
                    "content": f"""Analyze this CV for a {position} position and extract:
1. Skills (as array)
2. Experience highlights (as array)
3. Education (as array)
4. Brief summary

CV Text:
{cv_text[:6000]}

Respond ONLY with JSON using keys: skills, experience, education, summary""",
                },
            ],
            model=get_model_for_feature(FEATURE),
            temperature=get_temperature_for_feature(FEATURE),
            max_tokens=1000,
        )
        data: Dict[str, Any] = parse_json_payload(response.content, expect=dict)
        summary = data.get("summary")
        if not isinstance(summary, str):
            raise ValueError("summary must be a string")

        return CVAnalysisResponse(
            skills=_string_list(data.get("skills")),
            experience=_string_list(data.get("experience")),
            education=_string_list(data.get("education")),
            summary=summary.strip(),
            source="llm",
        )

    def _analyze_rule_based(self, cv_text: str, position: str) -> CVAnalysisResponse:
        lines = [line.strip() for line in cv_text.splitlines() if line.strip()]
        skills = _find_skills(cv_text.lower())
        education = [line for line in lines if any(word in line.lower() for word in EDUCATION_WORDS)][:5]
        experience = [line for line in lines if _YEAR_RANGE_RE.search(line) and line not in education][:8]

        summary = (
            f"Candidate for {position} with {len(skills)} recognised technical skill(s)"
            f"{': ' + ', '.join(skills[:5]) if skills else ''}. "
            f"{len(experience)} dated experience entr{'y' if len(experience) == 1 else 'ies'} found."
        )

        return CVAnalysisResponse(
            skills=skills,
            experience=experience,
            education=education,
            summary=summary,
            source="heuristic",
        )
