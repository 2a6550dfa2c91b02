"""
Orchestration Package

Routes business goals to agent variants and runs their workflows:
- Goal classification (ordered keyword and tool rules)
- Workflow planning (initialization prefix plus agent-specific steps)
- Sequential execution with progress notifications and cancellation
- Result synthesis
- Concurrent simulation runs
"""

from .classifier import CLASSIFICATION_RULES, ClassificationDecision, classify_goal, match_goal
from .executor import CancellationToken, WorkflowExecutor
from .orchestrator import (
    AgentOrchestrator,
    get_orchestrator,
    run_agent_workflow,
    stream_agent_workflow,
)
from .planner import BASE_STEPS, VARIANT_STEPS, WorkflowPlan, WorkflowStep, plan_workflow
from .simulation import SimulationHarness, SimulationReport, SimulationScenario, summarize_reports
from .state import ExecutionRun, RunStatus
from .synthesizer import ResultSynthesizer

__all__ = [
    # Classification
    "CLASSIFICATION_RULES",
    "ClassificationDecision",
    "classify_goal",
    "match_goal",
    # Planning
    "BASE_STEPS",
    "VARIANT_STEPS",
    "WorkflowPlan",
    "WorkflowStep",
    "plan_workflow",
    # Execution
    "CancellationToken",
    "ExecutionRun",
    "RunStatus",
    "ResultSynthesizer",
    "WorkflowExecutor",
    # Entry points
    "AgentOrchestrator",
    "get_orchestrator",
    "run_agent_workflow",
    "stream_agent_workflow",
    # Simulation
    "SimulationHarness",
    "SimulationReport",
    "SimulationScenario",
    "summarize_reports",
]
