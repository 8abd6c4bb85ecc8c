from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

PromptKind = Literal["intent", "emotional"]


@dataclass(frozen=True)
class Prompt:
    kind: PromptKind
    system: str
    user: str
    temperature: float = 0.2
    max_tokens: Optional[int] = None


INTENT_TEMPLATE = """\
You are an AI assistant specialized in analyzing Hebrew and English text for task management intent recognition.
Your job is to extract structured data from user input for a task management app that supports ADHD users.
Today is {today}.

Analyze the input text and return ONLY a JSON object with the following structure:
{{
  "intent": "create_task|edit_task|brain_dump|schedule_event|search_tasks|general_query",
  "confidence": 0.95,
  "extracted_data": {{
    "title": "extracted task title",
    "description": "additional details if any",
    "due_date": "ISO 8601 format if mentioned (YYYY-MM-DDTHH:mm:ss)",
    "priority": "important|simple|later",
    "type": "task|event",
    "tags": ["tag1", "tag2"],
    "location": "location if mentioned",
    "duration_minutes": 60
  }},
  "context_analysis": {{
    "urgency_level": "high|medium|low",
    "complexity": "simple|moderate|complex",
    "requires_focus": true
  }}
}}

Guidelines:
- Support both Hebrew and English input; keep the title in the language of the input
- Recognize time expressions like "היום" (today), "מחר" (tomorrow), "בשבוע הבא" (next week),
  and their English forms "today", "tomorrow", "next week"
- Detect priority indicators like "דחוף" (urgent), "חשוב" (important), "urgent", "important"
- Extract locations, people names, and context clues
- If intent is unclear, use "general_query" with low confidence
- For brain dumps, detect stream-of-consciousness or emotional content
- Always include a confidence score between 0 and 1 based on clarity of intent
"""

EMOTIONAL_TEMPLATE = """\
You are an AI assistant specialized in emotional state analysis for ADHD task management.
Analyze the text for emotional indicators and return ONLY a JSON object with this structure:
{
  "emotional_state": {
    "primary_emotion": "overwhelmed|excited|frustrated|calm|anxious|motivated|tired",
    "intensity": 0.8,
    "secondary_emotions": ["stressed", "hopeful"]
  },
  "cognitive_load": {
    "level": "high|medium|low",
    "indicators": ["scattered thoughts", "many topics", "urgent language"]
  },
  "adhd_indicators": {
    "hyperfocus_state": false,
    "executive_dysfunction": false,
    "emotional_dysregulation": false,
    "overwhelm_level": 0.7
  },
  "recommendations": {
    "break_down_tasks": false,
    "suggest_break": false,
    "prioritize_simple_tasks": false,
    "provide_encouragement": false
  }
}

Guidelines:
- Detect overwhelm through scattered language, many topics, or urgent tone
- Identify hyperfocus through detailed, obsessive language about one topic
- Recognize executive dysfunction through procrastination language or decision paralysis
- Look for time pressure, perfectionism, or self-criticism
- Support both Hebrew and English emotional expressions
  (e.g. "המום" / "overwhelmed", "עייף" / "tired", "דחוף" / "urgent")
- Consider ADHD-specific challenges in emotional regulation
- If the text carries no emotional signal, answer "calm" with low intensity
"""


class PromptBuilder:
    """Builds the two analysis prompts. Pure: the user text is passed through untouched."""

    def __init__(self, today: Optional[datetime] = None):
        self._today = today

    def build_intent_prompt(self, text: str) -> Prompt:
        today = (self._today or datetime.now()).strftime("%Y-%m-%d (%A)")
        return Prompt(
            kind="intent",
            system=INTENT_TEMPLATE.format(today=today),
            user=text,
            temperature=0.3,
            max_tokens=500,
        )

    def build_emotional_prompt(self, text: str) -> Prompt:
        return Prompt(
            kind="emotional",
            system=EMOTIONAL_TEMPLATE,
            user=text,
            temperature=0.2,
            max_tokens=300,
        )
