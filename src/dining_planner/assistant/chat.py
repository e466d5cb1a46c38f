# src/dining_planner/assistant/chat.py
from __future__ import annotations

"""
chat.py

Purpose:
    Conversational dining assistant: ordered chat turns in, one reply out.

Implementation notes:
  - Written for OpenAI's Python SDK (chat completions).
  - If OPENAI_API_KEY is missing (or "demo"), or the API call fails, the
    assistant answers with canned keyword replies instead of raising.
  - The planning core does not depend on this module and vice versa.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from openai import OpenAI

from dining_planner.config import OpenAISettings, get_openai_settings
from dining_planner.logging_utils import get_logger

logger = get_logger("chat")

SYSTEM_PREAMBLE = (
    "You are a friendly nutrition assistant for university students. "
    "You help students plan healthy, budget-friendly meals using campus dining options. "
    "Be encouraging and focus on practical nutrition advice for college students."
)

MAX_TOKENS = 500
TEMPERATURE = 0.7
EMPTY_REPLY = "Sorry, I couldn't generate a response."

# keyword -> canned reply, checked in order against the last user turn
CANNED_RESPONSES: Dict[str, str] = {
    "meal plan": (
        "I'd be happy to help you build a meal plan! Tell me your calorie and protein "
        "targets and your daily budget, and I'll pick an entree, a side, a drink and a "
        "snack from today's menus that fit them."
    ),
    "protein": (
        "For muscle building, aim for roughly 1.6-2.2 g of protein per kg of body weight. "
        "Grilled chicken, turkey sandwiches and Greek yogurt are reliable high-protein picks "
        "at most dining halls."
    ),
    "weight loss": (
        "For healthy weight loss, lean on lower-calorie, high-protein and high-fiber options "
        "like grain bowls, salads with grilled protein and fruit smoothies so you stay full "
        "in a calorie deficit."
    ),
    "budget": (
        "Let's keep it affordable! Yogurt parfaits, sides and grain bowls are usually the best "
        "value, and you can eat well for under $20 a day with smart choices."
    ),
}

DEFAULT_RESPONSE = (
    "I'm here to help with meal planning, nutrition information, budget-friendly options, "
    "dietary restrictions and fitness goals. What would you like help with?"
)


@dataclass
class ChatTurn:
    role: str      # "user" | "assistant"
    content: str

    def as_message(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


def canned_response(turns: Sequence[ChatTurn]) -> str:
    if not turns or turns[-1].role != "user":
        return DEFAULT_RESPONSE
    text = turns[-1].content.lower()
    for keyword, reply in CANNED_RESPONSES.items():
        if keyword in text:
            return reply
    return DEFAULT_RESPONSE


class DiningAssistant:
    def __init__(self, settings: Optional[OpenAISettings] = None, client: Optional[OpenAI] = None) -> None:
        settings = settings or get_openai_settings()
        self.model = settings.model

        if client is not None:
            self.client = client
        elif settings.api_key:
            self.client = OpenAI(api_key=settings.api_key)
        else:
            self.client = None

    def enabled(self) -> bool:
        return self.client is not None

    def build_messages(self, turns: Sequence[ChatTurn]) -> List[Dict[str, str]]:
        return [{"role": "system", "content": SYSTEM_PREAMBLE}] + [t.as_message() for t in turns]

    def respond(self, turns: Sequence[ChatTurn]) -> str:
        if not self.enabled():
            return canned_response(turns)

        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(turns),
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
            )
            content = resp.choices[0].message.content if resp.choices else None
            return content or EMPTY_REPLY
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Assistant call failed: %s",
                exc,
                extra={
                    "invoking_func": "DiningAssistant.respond",
                    "invoking_purpose": "Answer a chat turn with the LLM",
                    "next_step": "Answer with a canned reply instead",
                    "resolution": "Check OPENAI_API_KEY / OPENAI_MODEL and network access",
                },
            )
            return canned_response(turns)
