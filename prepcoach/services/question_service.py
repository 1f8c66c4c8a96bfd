"""
Interview question generation.

Asks the LLM for exactly QUESTION_COUNT questions as a JSON array. Non-JSON
output is salvaged by splitting it into lines; JSON of the wrong shape,
missing configuration or a failed call yields the fixed template set. The result
is always exactly QUESTION_COUNT non-empty questions numbered 1..N.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from prepcoach.core.config import QUESTION_COUNT
from prepcoach.llm.provider import LLMProvider
from prepcoach.llm.parsing import parse_json_payload, strip_code_fences
from prepcoach.llm.router import get_model_for_feature, get_temperature_for_feature

logger = logging.getLogger(__name__)

FEATURE = "question_generation"

SOURCE_LLM = "llm"
SOURCE_PARSED = "parsed"
SOURCE_TEMPLATE = "template"

# English / Turkish generic questions
TEMPLATE_QUESTIONS: List[str] = [
    "What is the strongest technical skill on your CV? / CV'nizdeki en güçlü teknik beceri nedir?",
    "Describe a difficult problem you faced and how you solved it. / Daha önce karşılaştığınız zor bir problemi anlatın.",
    "Tell us about your experience working in a team. / Takım çalışması deneyiminizden bahsedin.",
    "Why are you interested in this position? / Neden bu pozisyon?",
    "What are your career goals for the next few years? / Gelecek hedefleriniz neler?",
]

# "1.", "2)", "(3)", "Q4:", "-", "*", "•" at line start
_LIST_MARKER_RE = re.compile(r"^\s*(?:\(?\d+[.):]|q\d+[.):]?|question\s*\d+[.):]?|[-*•‣–])\s*", re.IGNORECASE)
_QUESTION_TEXT_KEYS = ("text", "question_text", "question")


@dataclass
class GeneratedQuestion:
    order_num: int
    question_text: str


@dataclass
class GeneratedQuestions:
    questions: List[GeneratedQuestion] = field(default_factory=list)
    source: str = SOURCE_TEMPLATE

    @property
    def texts(self) -> List[str]:
        return [q.question_text for q in self.questions]


def strip_wrapping_quotes(text: str) -> str:
    cleaned = text.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()
    return cleaned


def clean_question(text: str) -> str:
    """Strip list markers, wrapping quotes and trailing commas from one question line."""
    cleaned = _LIST_MARKER_RE.sub("", text.strip(), count=1).strip()
    return strip_wrapping_quotes(cleaned.rstrip(","))


def split_question_lines(text: str) -> List[str]:
    """
    Salvage questions from non-JSON output.

    When some lines carry list markers, only those lines are kept so intro
    sentences like "Here are five questions:" are dropped.
    """
    lines = [line.strip() for line in strip_code_fences(text).splitlines()]
    lines = [line for line in lines if line and line not in ("[", "]", "{", "}")]
    marked = [line for line in lines if _LIST_MARKER_RE.match(line)]
    candidates = marked or lines
    return [q for q in (clean_question(line) for line in candidates) if q]


def _question_from_item(item: Any) -> Optional[str]:
    if isinstance(item, str):
        return strip_wrapping_quotes(item) or None
    if isinstance(item, dict):
        for key in _QUESTION_TEXT_KEYS:
            value = item.get(key)
            if isinstance(value, str) and value.strip():
                return strip_wrapping_quotes(value) or None
    return None


def parse_question_payload(content: str) -> List[str]:
    """
    Read questions from a JSON array (or an object with a "questions" array).

    Raises:
        ValueError: If the content holds no usable JSON question list
    """
    try:
        items = parse_json_payload(content, expect=list)
    except ValueError:
        data = parse_json_payload(content, expect=dict)
        items = data.get("questions")
        if not isinstance(items, list):
            raise ValueError("JSON object has no questions array")

    questions = [q for q in (_question_from_item(item) for item in items) if q]
    if not questions:
        raise ValueError("JSON question list is empty")
    return questions


def is_json_document(content: str) -> bool:
    """True when the whole (fence-stripped) output parses as JSON."""
    try:
        json.loads(strip_code_fences(content or ""))
    except ValueError:
        return False
    return True


def fit_to_count(questions: List[str], count: int = QUESTION_COUNT) -> List[str]:
    """De-duplicate, truncate to `count` and pad from the templates."""
    seen = set()
    fitted: List[str] = []
    for question in questions:
        key = question.casefold()
        if key not in seen:
            seen.add(key)
            fitted.append(question)
        if len(fitted) == count:
            return fitted

    for template in TEMPLATE_QUESTIONS:
        if len(fitted) == count:
            break
        if template.casefold() not in seen:
            seen.add(template.casefold())
            fitted.append(template)
    return fitted


def _numbered(texts: List[str], source: str) -> GeneratedQuestions:
    return GeneratedQuestions(
        questions=[GeneratedQuestion(order_num=i, question_text=text) for i, text in enumerate(texts, start=1)],
        source=source,
    )


class QuestionGenerationService:
    """Produces the ordered question set for a new interview."""

    def __init__(self, provider: Optional[LLMProvider] = None, count: int = QUESTION_COUNT):
        if count > len(TEMPLATE_QUESTIONS):
            raise ValueError(f"count cannot exceed {len(TEMPLATE_QUESTIONS)} template questions")
        self.provider = provider
        self.count = count

    def template_questions(self) -> GeneratedQuestions:
        return _numbered(TEMPLATE_QUESTIONS[:self.count], SOURCE_TEMPLATE)

    def build_messages(self, cv_text: str, position: str) -> List[dict]:
        return [
            {
                "role": "system",
                "content": (
                    "You are an expert interviewer. Generate relevant, insightful interview questions "
                    "based on the candidate's CV and the position they are applying for."
                ),
            },
            {
                "role": "user",
                "content": f"""Generate exactly {self.count} interview questions for a {position} position based on this CV:

{cv_text[:6000]}

Requirements:
- Questions should be specific to their experience and skills
- Mix of technical and behavioral questions
- Each question should be clear and concise

Respond ONLY with a JSON array of {self.count} question strings, no markdown or extra text.""",
            },
        ]

    def generate(self, cv_text: str, position: str) -> GeneratedQuestions:
        """Return exactly `count` ordered questions. Never raises on LLM failure."""
        if self.provider is None:
            logger.info("No LLM configured - using template questions")
            return self.template_questions()

        try:
            response = self.provider.chat(
                messages=self.build_messages(cv_text or "", position),
                model=get_model_for_feature(FEATURE),
                temperature=get_temperature_for_feature(FEATURE),
                max_tokens=800,
            )
            content = response.content
        except Exception as e:
            logger.warning(f"LLM question generation failed, using templates: {type(e).__name__}: {e}")
            return self.template_questions()

        try:
            questions = parse_question_payload(content)
            source = SOURCE_LLM
        except ValueError:
            if is_json_document(content):
                # well-formed JSON of the wrong shape; its lines are not questions
                logger.warning(f"LLM returned JSON without usable questions - using templates: {content[:100]!r}")
                return self.template_questions()
            questions = split_question_lines(content)
            source = SOURCE_PARSED
            if not questions:
                logger.warning("LLM returned no usable questions - using templates")
                return self.template_questions()
            logger.info(f"Salvaged {len(questions)} questions from non-JSON LLM output")

        if len(questions) != self.count:
            logger.info(f"LLM returned {len(questions)} questions, fitting to {self.count}")
        return _numbered(fit_to_count(questions, self.count), source)
