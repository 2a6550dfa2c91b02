from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from ..core.config import Settings, get_settings
from ..core.logging import get_logger
from ..core.metrics import record_goal_classification
from ..schemas.agents import AgentVariant, Goal

logger = get_logger(name=__name__)

MatchSource = Literal["title", "description", "tools", "fallback"]

FALLBACK_VARIANT = AgentVariant.EXECUTION


@dataclass(frozen=True, slots=True)
class ClassificationRule:
    variant: AgentVariant
    title_keywords: tuple[str, ...]
    description_keywords: tuple[str, ...]
    tools: tuple[str, ...]

    def match(self, *, title: str, description: str, tools: frozenset[str]) -> tuple[MatchSource, str] | None:
        for keyword in self.title_keywords:
            if keyword in title:
                return "title", keyword
        for keyword in self.description_keywords:
            if keyword in description:
                return "description", keyword
        for tool in self.tools:
            if tool in tools:
                return "tools", tool
        return None


@dataclass(frozen=True, slots=True)
class ClassificationDecision:
    variant: AgentVariant
    matched_on: MatchSource
    keyword: str | None = None


# Evaluated in order; the first matching rule wins.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        variant=AgentVariant.SDR,
        title_keywords=("lead", "prospect", "outreach"),
        description_keywords=("linkedin", "cold"),
        tools=("linkedin", "prospecting"),
    ),
    ClassificationRule(
        variant=AgentVariant.EMAIL,
        title_keywords=("email", "campaign", "newsletter"),
        description_keywords=("email", "drip"),
        tools=("email", "mailchimp"),
    ),
    ClassificationRule(
        variant=AgentVariant.CALENDAR,
        title_keywords=("meeting", "schedule", "calendar"),
        description_keywords=("appointment", "booking"),
        tools=("calendar", "scheduling"),
    ),
    ClassificationRule(
        variant=AgentVariant.ANALYSIS,
        title_keywords=("analysis", "insight", "report"),
        description_keywords=("analytics", "metrics"),
        tools=("analytics", "reporting"),
    ),
    ClassificationRule(
        variant=AgentVariant.CONTENT,
        title_keywords=("content", "blog", "social"),
        description_keywords=("writing", "content"),
        tools=("content", "social-media"),
    ),
    ClassificationRule(
        variant=AgentVariant.AUTOMATION,
        title_keywords=("automat", "workflow", "process"),
        description_keywords=("automat", "workflow"),
        tools=("automation", "workflow"),
    ),
)


def coerce_goal(goal: Goal | Mapping[str, Any]) -> Goal:
    if isinstance(goal, Goal):
        return goal
    return Goal.model_validate(dict(goal))


def match_goal(goal: Goal | Mapping[str, Any], settings: Settings | None = None) -> ClassificationDecision:
    """Resolve a goal to exactly one agent variant and report which rule matched."""
    resolved = coerce_goal(goal)
    title = resolved.title.lower()
    description = resolved.description.lower()
    tools = frozenset(tool.strip().lower() for tool in resolved.tools_needed)

    decision = ClassificationDecision(variant=FALLBACK_VARIANT, matched_on="fallback")
    for rule in CLASSIFICATION_RULES:
        hit = rule.match(title=title, description=description, tools=tools)
        if hit is not None:
            decision = ClassificationDecision(variant=rule.variant, matched_on=hit[0], keyword=hit[1])
            break

    logger.debug(
        "goal_classified",
        title=resolved.title,
        variant=decision.variant.value,
        matched_on=decision.matched_on,
        keyword=decision.keyword,
    )
    if (settings or get_settings()).observability.prometheus_enabled:
        record_goal_classification(variant=decision.variant.value, matched_on=decision.matched_on)
    return decision


def classify_goal(goal: Goal | Mapping[str, Any], settings: Settings | None = None) -> AgentVariant:
    return match_goal(goal, settings).variant
