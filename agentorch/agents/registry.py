from __future__ import annotations

from typing import Iterator, Mapping

from ..schemas.agents import AgentProfile, AgentVariant
from .exceptions import AgentNotFoundError

__all__ = ["AgentRegistry", "get_registry"]


def _build_profiles() -> dict[AgentVariant, AgentProfile]:
    return {
        AgentVariant.PLANNING: AgentProfile(
            variant=AgentVariant.PLANNING,
            name="Strategic Planning Agent",
            description="Breaks business objectives into milestones, owners and a dated roadmap.",
            capabilities=frozenset({"goal-decomposition", "roadmapping", "resource-allocation"}),
            specializations=frozenset({"business-strategy", "project-planning"}),
            tools=("notion", "asana", "google_calendar"),
        ),
        AgentVariant.RESEARCH: AgentProfile(
            variant=AgentVariant.RESEARCH,
            name="Market Research Agent",
            description="Gathers market and competitor intelligence and condenses it into findings.",
            capabilities=frozenset({"information-synthesis", "competitive-intelligence", "source-evaluation"}),
            specializations=frozenset({"market-research", "trend-analysis"}),
            tools=("web_search", "linkedin", "google_analytics"),
        ),
        AgentVariant.CONTENT: AgentProfile(
            variant=AgentVariant.CONTENT,
            name="Content Creation Agent",
            description="Writes and distributes blog, social and marketing content.",
            capabilities=frozenset({"creative-writing", "audience-targeting", "content-scheduling"}),
            specializations=frozenset({"blog-posts", "social-media", "marketing-copy"}),
            tools=("openai", "linkedin", "twitter", "wordpress"),
        ),
        AgentVariant.EXECUTION: AgentProfile(
            variant=AgentVariant.EXECUTION,
            name="Task Execution Agent",
            description="Carries out general business tasks across connected integrations.",
            capabilities=frozenset({"task-execution", "integration-sync", "verification"}),
            specializations=frozenset({"general-operations"}),
            tools=("zapier", "slack", "hubspot"),
        ),
        AgentVariant.SDR: AgentProfile(
            variant=AgentVariant.SDR,
            name="AI SDR Agent",
            description="Researches prospects and runs personalized LinkedIn and email outreach.",
            capabilities=frozenset({"lead-research", "outreach-sequencing", "lead-qualification"}),
            specializations=frozenset({"cold-outreach", "prospecting", "linkedin-outreach"}),
            tools=("linkedin", "gmail", "hubspot", "apollo"),
        ),
        AgentVariant.EMAIL: AgentProfile(
            variant=AgentVariant.EMAIL,
            name="Email Campaign Agent",
            description="Builds segmented, personalized email campaigns and drip sequences.",
            capabilities=frozenset({"personalization", "send-optimization", "follow-up-automation"}),
            specializations=frozenset({"email-marketing", "drip-campaigns", "newsletters"}),
            tools=("gmail", "mailchimp", "hubspot"),
        ),
        AgentVariant.CALENDAR: AgentProfile(
            variant=AgentVariant.CALENDAR,
            name="Calendar Management Agent",
            description="Schedules meetings, resolves conflicts and manages reminders.",
            capabilities=frozenset({"availability-matching", "invitation-management", "reminder-management"}),
            specializations=frozenset({"meeting-scheduling", "appointment-booking"}),
            tools=("google_calendar", "calendly", "zoom"),
        ),
        AgentVariant.ANALYSIS: AgentProfile(
            variant=AgentVariant.ANALYSIS,
            name="Data Analysis Agent",
            description="Analyzes performance data and reports trends and actionable insights.",
            capabilities=frozenset({"statistical-analysis", "trend-identification", "reporting"}),
            specializations=frozenset({"business-intelligence", "sales-analytics"}),
            tools=("google_analytics", "salesforce", "tableau"),
        ),
        AgentVariant.AUTOMATION: AgentProfile(
            variant=AgentVariant.AUTOMATION,
            name="Workflow Automation Agent",
            description="Maps business processes and configures automated workflows and triggers.",
            capabilities=frozenset({"process-mapping", "workflow-design", "trigger-configuration"}),
            specializations=frozenset({"business-process-automation", "system-integration"}),
            tools=("zapier", "make", "slack", "trello"),
        ),
    }


class AgentRegistry:
    """Read-only catalog of agent variants, populated once at construction."""

    def __init__(self, profiles: Mapping[AgentVariant, AgentProfile] | None = None) -> None:
        source = dict(profiles) if profiles is not None else _build_profiles()
        missing = [variant.value for variant in AgentVariant if variant not in source]
        if missing:
            raise ValueError(f"Agent registry is missing variants: {', '.join(missing)}")
        self._profiles: dict[AgentVariant, AgentProfile] = source

    def lookup(self, variant_id: AgentVariant | str) -> AgentProfile:
        profile = self.get(variant_id)
        if profile is None:
            raise AgentNotFoundError(_display_id(variant_id))
        return profile

    def get(self, variant_id: AgentVariant | str) -> AgentProfile | None:
        variant = _coerce_variant(variant_id)
        if variant is None:
            return None
        return self._profiles.get(variant)

    def tools_for(self, variant_id: AgentVariant | str) -> list[str]:
        return list(self.lookup(variant_id).tools)

    def list_profiles(self) -> list[AgentProfile]:
        return [self._profiles[variant] for variant in AgentVariant]

    def __contains__(self, variant_id: object) -> bool:
        if not isinstance(variant_id, (AgentVariant, str)):
            return False
        return self.get(variant_id) is not None

    def __iter__(self) -> Iterator[AgentProfile]:
        return iter(self.list_profiles())

    def __len__(self) -> int:
        return len(self._profiles)


def _coerce_variant(variant_id: AgentVariant | str) -> AgentVariant | None:
    if isinstance(variant_id, AgentVariant):
        return variant_id
    try:
        return AgentVariant(str(variant_id).strip().lower())
    except ValueError:
        return None


def _display_id(variant_id: AgentVariant | str) -> str:
    if isinstance(variant_id, AgentVariant):
        return variant_id.value
    return str(variant_id)


_REGISTRY = AgentRegistry()


def get_registry() -> AgentRegistry:
    return _REGISTRY
