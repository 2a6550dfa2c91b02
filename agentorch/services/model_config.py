from __future__ import annotations

from enum import Enum
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from ..schemas.agents import AgentVariant


class TaskType(str, Enum):
    PROPOSAL_GENERATION = "proposal_generation"
    LEAD_SCORING = "lead_scoring"
    EMAIL_OUTREACH = "email_outreach"
    CONTENT_CREATION = "content_creation"
    DATA_ANALYSIS = "data_analysis"
    AUTOMATION_PLANNING = "automation_planning"
    RESEARCH_SYNTHESIS = "research_synthesis"
    DECISION_MAKING = "decision_making"


class ComplexityLevel(str, Enum):
    SIMPLE = "simple"
    INTERMEDIATE = "intermediate"
    COMPLEX = "complex"


class AgenticCapability(str, Enum):
    TOOL_USE = "tool_use"
    PLANNING = "planning"
    MEMORY_MANAGEMENT = "memory_management"
    OBSERVATION_REFLECTION = "observation_reflection"
    AUTONOMOUS_ITERATION = "autonomous_iteration"


class ModelConfig(BaseModel):
    """Generation parameters and prompt hints for one (task type, complexity) pair."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_version: str
    temperature: float = Field(..., ge=0.0, le=2.0)
    max_tokens: int = Field(..., ge=1)
    top_p: float = Field(..., gt=0.0, le=1.0)
    top_k: int = Field(..., ge=1)
    capabilities: tuple[str, ...] = ()
    specializations: tuple[str, ...] = ()
    prompt_optimizations: tuple[str, ...] = ()
    agentic_capabilities: tuple[AgenticCapability, ...] = ()


_SMALL = "gemma-2-9b-it"
_LARGE = "gemma-2-27b-it"

_TOOL = AgenticCapability.TOOL_USE
_PLAN = AgenticCapability.PLANNING
_MEM = AgenticCapability.MEMORY_MANAGEMENT
_REFLECT = AgenticCapability.OBSERVATION_REFLECTION
_ITERATE = AgenticCapability.AUTONOMOUS_ITERATION


def _cfg(
    model_version: str,
    temperature: float,
    max_tokens: int,
    top_p: float,
    top_k: int,
    capabilities: tuple[str, ...],
    specializations: tuple[str, ...],
    prompt_optimizations: tuple[str, ...],
    agentic: tuple[AgenticCapability, ...],
) -> ModelConfig:
    return ModelConfig(
        model_version=model_version,
        temperature=temperature,
        max_tokens=max_tokens,
        top_p=top_p,
        top_k=top_k,
        capabilities=capabilities,
        specializations=specializations,
        prompt_optimizations=prompt_optimizations,
        agentic_capabilities=agentic,
    )


_S, _I, _C = ComplexityLevel.SIMPLE, ComplexityLevel.INTERMEDIATE, ComplexityLevel.COMPLEX

MODEL_CONFIGS: Mapping[tuple[TaskType, ComplexityLevel], ModelConfig] = {
    (TaskType.PROPOSAL_GENERATION, _S): _cfg(
        _SMALL, 0.7, 2048, 0.9, 40,
        ("text-generation", "structured-output", "template-following"),
        ("business-writing", "persuasive-content"),
        ("clear-structure", "benefit-focused", "action-oriented"),
        (_TOOL,),
    ),
    (TaskType.PROPOSAL_GENERATION, _I): _cfg(
        _LARGE, 0.6, 4096, 0.85, 35,
        ("text-generation", "research-integration", "personalization", "multi-step-reasoning"),
        ("business-strategy", "market-analysis", "competitive-positioning"),
        ("data-driven", "stakeholder-analysis", "roi-focused"),
        (_PLAN, _TOOL, _MEM),
    ),
    (TaskType.PROPOSAL_GENERATION, _C): _cfg(
        _LARGE, 0.5, 8192, 0.8, 30,
        ("advanced-reasoning", "multi-agent-coordination", "tool-integration", "strategic-planning"),
        ("enterprise-sales", "complex-negotiations", "multi-stakeholder-alignment"),
        ("systematic-analysis", "risk-assessment", "scenario-planning"),
        (_PLAN, _TOOL, _MEM, _ITERATE),
    ),
    (TaskType.LEAD_SCORING, _S): _cfg(
        _SMALL, 0.3, 1024, 0.8, 25,
        ("classification", "scoring", "pattern-recognition"),
        ("basic-lead-qualification", "simple-scoring-models"),
        ("criteria-based", "consistent-scoring", "clear-categories"),
        (_TOOL, _PLAN),
    ),
    (TaskType.LEAD_SCORING, _I): _cfg(
        _LARGE, 0.2, 2048, 0.75, 20,
        ("advanced-classification", "multi-factor-analysis", "predictive-scoring"),
        ("behavioral-analysis", "intent-detection", "conversion-prediction"),
        ("data-weighted", "historical-context", "predictive-modeling"),
        (_TOOL, _PLAN, _REFLECT),
    ),
    (TaskType.LEAD_SCORING, _C): _cfg(
        _LARGE, 0.1, 4096, 0.7, 15,
        ("machine-learning-integration", "real-time-analysis", "dynamic-scoring"),
        ("enterprise-lead-models", "multi-channel-analysis", "lifetime-value-prediction"),
        ("algorithmic-approach", "continuous-learning", "market-adaptation"),
        (_TOOL, _PLAN, _REFLECT, _ITERATE),
    ),
    (TaskType.EMAIL_OUTREACH, _S): _cfg(
        _SMALL, 0.8, 1024, 0.9, 40,
        ("personalization", "tone-adaptation", "template-generation"),
        ("cold-outreach", "follow-up-sequences"),
        ("conversational-tone", "value-proposition", "clear-cta"),
        (_TOOL,),
    ),
    (TaskType.EMAIL_OUTREACH, _I): _cfg(
        _LARGE, 0.7, 2048, 0.85, 35,
        ("advanced-personalization", "context-awareness", "multi-touch-campaigns"),
        ("industry-specific", "role-based-messaging", "timing-optimization"),
        ("research-integration", "pain-point-focused", "relationship-building"),
        (_TOOL, _MEM),
    ),
    (TaskType.EMAIL_OUTREACH, _C): _cfg(
        _LARGE, 0.6, 4096, 0.8, 30,
        ("strategic-messaging", "stakeholder-mapping", "campaign-orchestration"),
        ("enterprise-outreach", "multi-stakeholder-campaigns", "account-based-marketing"),
        ("strategic-narrative", "stakeholder-alignment", "ecosystem-awareness"),
        (_PLAN, _TOOL, _MEM, _REFLECT, _ITERATE),
    ),
    (TaskType.CONTENT_CREATION, _S): _cfg(
        _SMALL, 0.8, 2048, 0.9, 40,
        ("creative-writing", "format-adaptation", "audience-targeting"),
        ("blog-posts", "social-media", "basic-marketing-copy"),
        ("engaging-headlines", "clear-structure", "audience-appropriate"),
        (_TOOL,),
    ),
    (TaskType.CONTENT_CREATION, _I): _cfg(
        _LARGE, 0.7, 4096, 0.85, 35,
        ("advanced-storytelling", "brand-voice-adaptation", "multi-format-content"),
        ("thought-leadership", "technical-content", "conversion-optimization"),
        ("brand-consistency", "seo-optimization", "engagement-focused"),
        (_PLAN, _TOOL),
    ),
    (TaskType.CONTENT_CREATION, _C): _cfg(
        _LARGE, 0.6, 8192, 0.8, 30,
        ("strategic-content-planning", "cross-channel-coordination", "content-ecosystem-design"),
        ("content-strategy", "multi-stakeholder-content", "complex-narrative-development"),
        ("strategic-alignment", "ecosystem-integration", "long-term-impact"),
        (_PLAN, _TOOL, _MEM, _ITERATE),
    ),
    (TaskType.DATA_ANALYSIS, _S): _cfg(
        _SMALL, 0.2, 2048, 0.8, 25,
        ("pattern-recognition", "basic-statistics", "trend-identification"),
        ("descriptive-analytics", "simple-reporting"),
        ("data-accuracy", "clear-insights", "actionable-recommendations"),
        (_TOOL,),
    ),
    (TaskType.DATA_ANALYSIS, _I): _cfg(
        _LARGE, 0.1, 4096, 0.75, 20,
        ("advanced-analytics", "correlation-analysis", "predictive-insights"),
        ("business-intelligence", "performance-analysis", "market-research"),
        ("statistical-rigor", "business-context", "strategic-implications"),
        (_TOOL, _PLAN, _REFLECT),
    ),
    (TaskType.DATA_ANALYSIS, _C): _cfg(
        _LARGE, 0.05, 8192, 0.7, 15,
        ("machine-learning-integration", "complex-modeling", "multi-dimensional-analysis"),
        ("enterprise-analytics", "predictive-modeling", "optimization-strategies"),
        ("model-validation", "uncertainty-quantification", "decision-support"),
        (_TOOL, _PLAN, _REFLECT, _ITERATE),
    ),
    (TaskType.AUTOMATION_PLANNING, _S): _cfg(
        _SMALL, 0.4, 2048, 0.8, 30,
        ("process-mapping", "workflow-design", "basic-automation"),
        ("simple-workflows", "task-automation"),
        ("step-by-step", "clear-dependencies", "error-handling"),
        (_PLAN,),
    ),
    (TaskType.AUTOMATION_PLANNING, _I): _cfg(
        _LARGE, 0.3, 4096, 0.75, 25,
        ("complex-workflows", "integration-planning", "optimization-strategies"),
        ("business-process-automation", "system-integration"),
        ("efficiency-optimization", "scalability-planning", "maintenance-considerations"),
        (_PLAN, _TOOL),
    ),
    (TaskType.AUTOMATION_PLANNING, _C): _cfg(
        _LARGE, 0.2, 8192, 0.7, 20,
        ("enterprise-automation", "multi-system-orchestration", "ai-agent-coordination"),
        ("complex-automation-ecosystems", "intelligent-process-automation"),
        ("architectural-thinking", "resilience-planning", "continuous-improvement"),
        (_PLAN, _TOOL, _REFLECT, _ITERATE),
    ),
    (TaskType.RESEARCH_SYNTHESIS, _S): _cfg(
        _SMALL, 0.3, 2048, 0.8, 25,
        ("information-synthesis", "source-evaluation", "summary-generation"),
        ("basic-research", "fact-compilation"),
        ("source-citation", "clear-synthesis", "relevant-filtering"),
        (_TOOL,),
    ),
    (TaskType.RESEARCH_SYNTHESIS, _I): _cfg(
        _LARGE, 0.2, 4096, 0.75, 20,
        ("advanced-synthesis", "cross-source-analysis", "insight-generation"),
        ("market-research", "competitive-intelligence", "trend-analysis"),
        ("analytical-depth", "pattern-identification", "strategic-insights"),
        (_TOOL, _PLAN, _MEM),
    ),
    (TaskType.RESEARCH_SYNTHESIS, _C): _cfg(
        _LARGE, 0.1, 8192, 0.7, 15,
        ("meta-analysis", "knowledge-integration", "hypothesis-generation"),
        ("strategic-research", "multi-domain-synthesis", "innovation-research"),
        ("systematic-approach", "bias-mitigation", "knowledge-gaps-identification"),
        (_TOOL, _PLAN, _MEM, _REFLECT),
    ),
    (TaskType.DECISION_MAKING, _S): _cfg(
        _SMALL, 0.3, 1024, 0.8, 25,
        ("option-evaluation", "criteria-based-assessment", "basic-recommendation"),
        ("simple-decisions", "clear-trade-offs"),
        ("pros-cons-analysis", "clear-criteria", "actionable-recommendations"),
        (_PLAN,),
    ),
    (TaskType.DECISION_MAKING, _I): _cfg(
        _LARGE, 0.2, 2048, 0.75, 20,
        ("multi-criteria-analysis", "risk-assessment", "scenario-planning"),
        ("business-decisions", "strategic-choices", "optimization"),
        ("weighted-analysis", "risk-consideration", "implementation-planning"),
        (_PLAN, _REFLECT),
    ),
    (TaskType.DECISION_MAKING, _C): _cfg(
        _LARGE, 0.1, 4096, 0.7, 15,
        ("strategic-decision-making", "stakeholder-analysis", "long-term-planning"),
        ("enterprise-decisions", "complex-trade-offs", "system-thinking"),
        ("holistic-analysis", "stakeholder-impact", "long-term-consequences"),
        (_PLAN, _MEM, _REFLECT, _ITERATE),
    ),
}

VARIANT_TASK_TYPES: Mapping[AgentVariant, TaskType] = {
    AgentVariant.PLANNING: TaskType.DECISION_MAKING,
    AgentVariant.RESEARCH: TaskType.RESEARCH_SYNTHESIS,
    AgentVariant.CONTENT: TaskType.CONTENT_CREATION,
    AgentVariant.EXECUTION: TaskType.AUTOMATION_PLANNING,
    AgentVariant.SDR: TaskType.LEAD_SCORING,
    AgentVariant.EMAIL: TaskType.EMAIL_OUTREACH,
    AgentVariant.CALENDAR: TaskType.AUTOMATION_PLANNING,
    AgentVariant.ANALYSIS: TaskType.DATA_ANALYSIS,
    AgentVariant.AUTOMATION: TaskType.AUTOMATION_PLANNING,
}

_missing_configs = [
    f"{task.value}/{level.value}"
    for task in TaskType
    for level in ComplexityLevel
    if (task, level) not in MODEL_CONFIGS
]
_missing_variants = [variant.value for variant in AgentVariant if variant not in VARIANT_TASK_TYPES]
if _missing_configs or _missing_variants:  # pragma: no cover - guarded at import
    raise RuntimeError(f"Incomplete model tables: {_missing_configs + _missing_variants}")

_CREATIVE_HINTS = ("creative", "email", "content")
_ANALYTICAL_HINTS = ("analysis", "scoring", "analytics")


def get_model_config(task_type: TaskType | str, complexity: ComplexityLevel | str) -> ModelConfig:
    return MODEL_CONFIGS[(TaskType(task_type), ComplexityLevel(complexity))]


def model_config_for_variant(variant: AgentVariant, complexity: ComplexityLevel | str) -> ModelConfig:
    return get_model_config(VARIANT_TASK_TYPES[variant], complexity)


def tune_temperature(config: ModelConfig, task_hint: str) -> ModelConfig:
    """Return a copy of ``config`` with the temperature nudged for creative or analytical work."""
    hint = task_hint.lower()
    if any(token in hint for token in _CREATIVE_HINTS):
        return config.model_copy(update={"temperature": 0.7})
    if any(token in hint for token in _ANALYTICAL_HINTS):
        return config.model_copy(update={"temperature": 0.2})
    return config
