"""
Failure policy for each recommendation stage.

Required stages propagate their errors. Best-effort stages log a warning and
yield a fallback, since a usable recommendation can still be produced
without them.
"""

import inspect
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, TypeVar, Union

from k8s_advisor.utils.logger import ComponentLogger

stage_logger = ComponentLogger("K8S_ADVISOR_RECOMMENDER")

R = TypeVar("R")


class StagePolicy(str, Enum):
    REQUIRED = "required"
    BEST_EFFORT = "best-effort"


class Stage(str, Enum):
    CAPABILITY_SEARCH = "capability_search"
    PATTERN_SEARCH = "pattern_search"
    SOLUTION_ASSEMBLY = "solution_assembly"
    PATTERN_INJECTION = "pattern_injection"
    SCHEMA_ENRICHMENT = "schema_enrichment"
    POLICY_SEARCH = "policy_search"
    CLUSTER_DISCOVERY = "cluster_discovery"
    QUESTION_GENERATION = "question_generation"


STAGE_POLICIES: Dict[Stage, StagePolicy] = {
    Stage.CAPABILITY_SEARCH: StagePolicy.REQUIRED,
    Stage.PATTERN_SEARCH: StagePolicy.BEST_EFFORT,
    Stage.SOLUTION_ASSEMBLY: StagePolicy.REQUIRED,
    Stage.PATTERN_INJECTION: StagePolicy.REQUIRED,
    Stage.SCHEMA_ENRICHMENT: StagePolicy.REQUIRED,
    Stage.POLICY_SEARCH: StagePolicy.BEST_EFFORT,
    Stage.CLUSTER_DISCOVERY: StagePolicy.BEST_EFFORT,
    Stage.QUESTION_GENERATION: StagePolicy.BEST_EFFORT,
}


async def run_stage(
    stage: Stage,
    action: Callable[[], Union[R, Awaitable[R]]],
    fallback: Callable[[], Any] = lambda: None,
) -> R:
    """
    Run one stage under its policy.

    Args:
        stage: Stage being run
        action: Zero-argument callable doing the stage's work; may return an awaitable
        fallback: Produces the value returned when a best-effort stage fails
    """
    policy = STAGE_POLICIES[stage]
    try:
        result = action()
        if inspect.isawaitable(result):
            result = await result
        return result
    except Exception as e:
        if policy is StagePolicy.REQUIRED:
            raise
        stage_logger.log_structured(
            level="WARNING",
            message="Best-effort stage failed, using fallback",
            extra={"stage": stage.value, "error": str(e), "error_type": type(e).__name__}
        )
        return fallback()
