from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping

from ..agents.exceptions import AgentNotFoundError
from ..core.logging import get_logger
from ..schemas.agents import AgentVariant

logger = get_logger(name=__name__)


@dataclass(frozen=True, slots=True)
class WorkflowStep:
    label: str
    duration_ms: int


@dataclass(frozen=True, slots=True)
class WorkflowPlan:
    variant: AgentVariant
    steps: tuple[WorkflowStep, ...]

    @property
    def labels(self) -> list[str]:
        return [step.label for step in self.steps]

    @property
    def total_duration_ms(self) -> int:
        return sum(step.duration_ms for step in self.steps)

    def __iter__(self) -> Iterator[WorkflowStep]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index: int) -> WorkflowStep:
        return self.steps[index]


BASE_STEPS: tuple[WorkflowStep, ...] = (
    WorkflowStep("Analyzing input parameters", 800),
    WorkflowStep("Initializing agent capabilities", 1200),
    WorkflowStep("Connecting to required tools", 1500),
)

VARIANT_STEPS: Mapping[AgentVariant, tuple[WorkflowStep, ...]] = {
    AgentVariant.PLANNING: (
        WorkflowStep("Analyzing business objectives", 2000),
        WorkflowStep("Identifying key milestones", 1800),
        WorkflowStep("Allocating resources and owners", 1500),
        WorkflowStep("Generating strategic roadmap", 2500),
    ),
    AgentVariant.RESEARCH: (
        WorkflowStep("Gathering market data sources", 2500),
        WorkflowStep("Analyzing competitor landscape", 2200),
        WorkflowStep("Synthesizing key findings", 2000),
        WorkflowStep("Compiling research report", 1800),
    ),
    AgentVariant.CONTENT: (
        WorkflowStep("Researching target audience", 1800),
        WorkflowStep("Generating content outline", 1500),
        WorkflowStep("Drafting and refining copy", 3000),
        WorkflowStep("Scheduling content distribution", 1000),
    ),
    AgentVariant.EXECUTION: (
        WorkflowStep("Validating execution prerequisites", 1000),
        WorkflowStep("Executing primary actions", 2500),
        WorkflowStep("Syncing results across integrations", 2000),
        WorkflowStep("Verifying task completion", 1200),
    ),
    AgentVariant.SDR: (
        WorkflowStep("Researching prospect profile", 2000),
        WorkflowStep("Crafting personalized outreach message", 2500),
        WorkflowStep("Scheduling connection request", 1000),
        WorkflowStep("Setting up follow-up sequence", 1500),
    ),
    AgentVariant.EMAIL: (
        WorkflowStep("Segmenting target audience", 1500),
        WorkflowStep("Personalizing email content", 2500),
        WorkflowStep("Optimizing send schedule", 1000),
        WorkflowStep("Launching campaign sequence", 1200),
    ),
    AgentVariant.CALENDAR: (
        WorkflowStep("Checking participant availability", 1500),
        WorkflowStep("Finding optimal time slots", 1200),
        WorkflowStep("Sending calendar invitations", 1000),
        WorkflowStep("Configuring meeting reminders", 500),
    ),
    AgentVariant.ANALYSIS: (
        WorkflowStep("Collecting performance data", 2000),
        WorkflowStep("Running statistical analysis", 3000),
        WorkflowStep("Identifying trends and patterns", 2200),
        WorkflowStep("Generating insights report", 1800),
    ),
    AgentVariant.AUTOMATION: (
        WorkflowStep("Mapping existing workflow", 1800),
        WorkflowStep("Designing automation rules", 2200),
        WorkflowStep("Configuring integration triggers", 1500),
        WorkflowStep("Testing automated workflow", 2000),
    ),
}

_missing = [variant.value for variant in AgentVariant if len(VARIANT_STEPS.get(variant, ())) != 4]
if _missing:  # pragma: no cover - guarded at import
    raise RuntimeError(f"Workflow steps must define exactly four entries for: {', '.join(_missing)}")


def plan_workflow(variant: AgentVariant | str) -> WorkflowPlan:
    """Expand an agent variant into its ordered initialization and agent-specific steps."""
    resolved = _resolve(variant)
    plan = WorkflowPlan(variant=resolved, steps=BASE_STEPS + VARIANT_STEPS[resolved])
    logger.debug("workflow_planned", variant=resolved.value, steps=len(plan))
    return plan


def _resolve(variant: AgentVariant | str) -> AgentVariant:
    if isinstance(variant, AgentVariant):
        return variant
    try:
        return AgentVariant(str(variant).strip().lower())
    except ValueError as exc:
        raise AgentNotFoundError(str(variant)) from exc
