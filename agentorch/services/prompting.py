"""Prompt augmentation helpers.

Every helper is a pure ``str -> str`` transform (or a factory returning one) so callers
compose them over a base prompt with :func:`compose_prompt` instead of concatenating text
at each call site.
"""

from __future__ import annotations

import re
from functools import partial
from typing import Callable, Iterable, Mapping

from .model_config import AgenticCapability, ComplexityLevel, TaskType, get_model_config

PromptTransform = Callable[[str], str]

_CAPABILITY_INSTRUCTIONS: Mapping[AgenticCapability, str] = {
    AgenticCapability.PLANNING: (
        "PLANNING INSTRUCTION: Before executing any task, first outline your step-by-step plan. "
        "Think through the logical sequence of actions needed to achieve the goal."
    ),
    AgenticCapability.TOOL_USE: (
        "TOOL USE INSTRUCTION: Identify which tools you need for each step. Format tool requests "
        "clearly and interpret tool outputs to inform your next actions."
    ),
    AgenticCapability.MEMORY_MANAGEMENT: (
        "MEMORY INSTRUCTION: Consider relevant historical context and past interactions. "
        "Use this information to personalize and improve your approach."
    ),
    AgenticCapability.OBSERVATION_REFLECTION: (
        "REFLECTION INSTRUCTION: After completing tasks, analyze what worked well and what could "
        "be improved. Use this insight to enhance future performance."
    ),
    AgenticCapability.AUTONOMOUS_ITERATION: (
        "ITERATION INSTRUCTION: If initial results are not optimal, automatically adjust your "
        "approach and try alternative strategies until you achieve the desired outcome."
    ),
}

_CHAIN_OF_THOUGHT: Mapping[TaskType, tuple[str, ...]] = {
    TaskType.PROPOSAL_GENERATION: (
        "**Analyze Requirements**: What are the key objectives and constraints?",
        "**Research Context**: What market conditions and competitive factors matter?",
        "**Identify Value Propositions**: What unique benefits can we offer?",
        "**Structure Proposal**: How should we organize the proposal for maximum impact?",
        "**Optimize Content**: How can we make each section more compelling?",
        "**Review and Refine**: What improvements would strengthen the proposal?",
    ),
    TaskType.LEAD_SCORING: (
        "**Evaluate Data Quality**: What information is available and reliable?",
        "**Apply Scoring Criteria**: Which factors indicate higher conversion probability?",
        "**Assess Behavioral Signals**: What actions suggest genuine interest?",
        "**Consider Context Factors**: How do timing and market conditions affect scoring?",
        "**Calculate Composite Score**: How should different factors be weighted?",
        "**Provide Reasoning**: Why did this lead receive this score?",
    ),
    TaskType.EMAIL_OUTREACH: (
        "**Analyze Recipient Profile**: What do we know about this person and their role?",
        "**Identify Pain Points**: What challenges might they be facing?",
        "**Craft Value Proposition**: How can we help solve their specific problems?",
        "**Choose Tone and Style**: What communication style will resonate best?",
        "**Structure Message**: How should we organize for maximum engagement?",
        "**Include Call-to-Action**: What specific next step do we want them to take?",
    ),
    TaskType.CONTENT_CREATION: (
        "**Define Audience**: Who exactly are we writing for?",
        "**Clarify Objectives**: What do we want readers to think, feel, or do?",
        "**Research Topic**: What insights and information should we include?",
        "**Plan Structure**: How should we organize the content for best flow?",
        "**Write with Purpose**: How does each section serve our objectives?",
        "**Optimize for Engagement**: What will keep readers interested throughout?",
    ),
    TaskType.DATA_ANALYSIS: (
        "**Understand Data Context**: What does this data represent and how was it collected?",
        "**Identify Patterns**: What trends, correlations, or anomalies are visible?",
        "**Consider Statistical Significance**: Which findings are meaningful vs. noise?",
        "**Analyze Business Impact**: What do these patterns mean for business outcomes?",
        "**Generate Insights**: What actionable conclusions can we draw?",
        "**Recommend Actions**: What specific steps should be taken based on this analysis?",
    ),
    TaskType.AUTOMATION_PLANNING: (
        "**Map Current Process**: What are all the steps in the existing workflow?",
        "**Identify Automation Opportunities**: Which steps can be automated effectively?",
        "**Assess Dependencies**: What systems, data, or approvals are required?",
        "**Design Workflow**: How should the automated process flow?",
        "**Plan Error Handling**: What could go wrong and how should we handle it?",
        "**Consider Maintenance**: How will this automation be monitored and updated?",
    ),
    TaskType.RESEARCH_SYNTHESIS: (
        "**Evaluate Sources**: Which sources are most credible and relevant?",
        "**Identify Key Themes**: What common patterns emerge across sources?",
        "**Note Contradictions**: Where do sources disagree and why might that be?",
        "**Synthesize Insights**: What new understanding emerges from combining sources?",
        "**Assess Gaps**: What important questions remain unanswered?",
        "**Draw Conclusions**: What are the most important takeaways for our purpose?",
    ),
    TaskType.DECISION_MAKING: (
        "**Frame the Decision**: What exactly needs to be decided and by when?",
        "**Identify Options**: What are all the viable alternatives?",
        "**Define Criteria**: What factors should influence this decision?",
        "**Evaluate Trade-offs**: What are the pros and cons of each option?",
        "**Assess Risks**: What could go wrong with each choice?",
        "**Make Recommendation**: Which option best serves our objectives and why?",
    ),
}

_AGENTIC_GUIDELINES = (
    "**Think Step-by-Step**: Break complex tasks into logical steps",
    "**Reason Explicitly**: Show your thinking process clearly",
    "**Iterate and Improve**: Refine your approach based on results",
    "**Consider Multiple Perspectives**: Evaluate from different angles",
    "**Plan Before Acting**: Outline your approach before executing",
    "**Monitor Progress**: Check if you're on track toward the goal",
    "**Adapt Strategy**: Adjust your approach if needed",
    "**Provide Clear Rationale**: Explain why you made specific choices",
)

_SAFETY_GUIDELINES = (
    "Always verify information before making decisions",
    "Respect user privacy and data protection",
    "Avoid biased or discriminatory recommendations",
    "Maintain professional and ethical standards",
    "Flag any concerning or inappropriate requests",
    "Ensure transparency in automated actions",
)

_WORD_START = re.compile(r"\b\w")


def humanize(token: str) -> str:
    """``'data-driven'`` -> ``'Data Driven'``."""
    return _WORD_START.sub(lambda match: match.group(0).upper(), token.replace("-", " ").replace("_", " "))


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def with_task_configuration(prompt: str, task_type: TaskType | str, complexity: ComplexityLevel | str) -> str:
    task = TaskType(task_type)
    level = ComplexityLevel(complexity)
    config = get_model_config(task, level)
    sections = [
        prompt,
        "## Task Configuration:\n"
        f"Task Type: {task.value}\n"
        f"Complexity Level: {level.value}\n"
        f"Optimized for: {', '.join(config.specializations)}",
        "## Optimization Guidelines:\n" + _bullets(humanize(item) for item in config.prompt_optimizations),
        "## Available Capabilities:\n" + _bullets(humanize(item) for item in config.capabilities),
    ]
    return "\n\n".join(sections)


def with_capability_instructions(prompt: str, capabilities: Iterable[AgenticCapability | str]) -> str:
    requested = {AgenticCapability(item) for item in capabilities}
    instructions = [text for capability, text in _CAPABILITY_INSTRUCTIONS.items() if capability in requested]
    if not instructions:
        return prompt
    return "\n\n".join([prompt, *instructions])


def with_chain_of_thought(prompt: str, task_type: TaskType | str) -> str:
    steps = _CHAIN_OF_THOUGHT[TaskType(task_type)]
    numbered = "\n".join(f"{index}. {step}" for index, step in enumerate(steps, start=1))
    return f"{prompt}\n\n## Chain of Thought Process:\n{numbered}"


def with_agentic_guidelines(prompt: str) -> str:
    return f"{prompt}\n\n## Agentic Behavior Guidelines:\n{_bullets(_AGENTIC_GUIDELINES)}"


def with_iteration_framework(prompt: str, max_iterations: int = 3) -> str:
    if max_iterations < 1:
        raise ValueError("max_iterations must be at least 1")
    tracker = "\n".join(f"- Iteration {index}: [approach and result]" for index in range(1, max_iterations + 1))
    framework = (
        "AUTONOMOUS ITERATION FRAMEWORK:\n"
        f"You can iterate up to {max_iterations} times to improve your results.\n\n"
        "For each iteration:\n"
        "1. Evaluate your current result against the goal\n"
        "2. Identify specific areas for improvement\n"
        "3. Adjust your strategy or approach\n"
        "4. Execute the improved version\n"
        "5. Check if the result meets quality standards\n\n"
        "Track your iterations:\n"
        f"{tracker}"
    )
    return f"{prompt}\n\n{framework}"


def with_safety_guidelines(prompt: str) -> str:
    return f"{prompt}\n\nSAFETY GUIDELINES:\n{_bullets(_SAFETY_GUIDELINES)}"


def compose_prompt(base: str, *transforms: PromptTransform) -> str:
    prompt = base
    for transform in transforms:
        prompt = transform(prompt)
    return prompt


def build_agent_prompt(
    base: str,
    task_type: TaskType | str,
    complexity: ComplexityLevel | str,
    *,
    chain_of_thought: bool = True,
    safety: bool = True,
) -> str:
    """Full system prompt for an agent: configuration, capability instructions, reasoning scaffolds."""
    config = get_model_config(task_type, complexity)
    transforms: list[PromptTransform] = [
        partial(with_task_configuration, task_type=task_type, complexity=complexity),
        partial(with_capability_instructions, capabilities=config.agentic_capabilities),
    ]
    if chain_of_thought:
        transforms.append(partial(with_chain_of_thought, task_type=task_type))
    if AgenticCapability.AUTONOMOUS_ITERATION in config.agentic_capabilities:
        transforms.append(with_iteration_framework)
    transforms.append(with_agentic_guidelines)
    if safety:
        transforms.append(with_safety_guidelines)
    return compose_prompt(base, *transforms)
