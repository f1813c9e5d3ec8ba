"""
Resource recommendation pipeline.

intent -> capability + pattern search -> LLM solution assembly ->
pattern injection -> schema enrichment -> policy-aware question generation.

Each stage runs under the policy in ``STAGE_POLICIES``; the recommender keeps
no state between calls.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError

from k8s_advisor.core.cluster.cluster_options import format_cluster_options, inject_cluster_options
from k8s_advisor.core.llm.ai_provider import AIProvider
from k8s_advisor.core.models.capability import ResourceCapability
from k8s_advisor.core.models.cluster import ClusterOptions
from k8s_advisor.core.models.organizational import OrganizationalPattern, PolicyIntent
from k8s_advisor.core.models.solution import (
    QuestionGroup,
    ResourceCandidate,
    ResourceSolution,
    SolutionAssemblyResponse,
    SolutionResult,
)
from k8s_advisor.core.models.vector import BaseSearchResult
from k8s_advisor.core.recommender.pattern_injection import add_pattern_resources
from k8s_advisor.core.recommender.recommender_prompts import (
    QUESTION_GENERATION_SYSTEM_PROMPT,
    QUESTION_GENERATION_USER_PROMPT,
    SOLUTION_ASSEMBLY_SYSTEM_PROMPT,
    SOLUTION_ASSEMBLY_USER_PROMPT,
)
from k8s_advisor.core.recommender.stage_policy import Stage, run_stage
from k8s_advisor.core.vector.capability_vector_service import CapabilityVectorService
from k8s_advisor.core.vector.pattern_vector_service import PatternVectorService
from k8s_advisor.core.vector.policy_vector_service import PolicyVectorService
from k8s_advisor.utils.exceptions import (
    AIProviderNotInitializedError,
    CapabilitySearchError,
    CapabilityServiceUnavailableError,
    JSONExtractionError,
    MissingResourceNameError,
    NoCapabilitiesFoundError,
    SchemaFetchError,
    SolutionParseError,
)
from k8s_advisor.utils.json_utils import extract_json_object
from k8s_advisor.utils.logger import ComponentLogger

recommender_logger = ComponentLogger("K8S_ADVISOR_RECOMMENDER")

ExplainResource = Callable[[str], Awaitable[Any]]
ClusterDiscovery = Callable[[], Awaitable[ClusterOptions]]

SCAN_HINT = "Please scan your cluster first to populate the capability store."
RAW_RESPONSE_EXCERPT = 500
QUESTION_TIERS = ("required", "basic", "advanced", "open")


def extract_kind_from_resource_name(resource_name: str) -> str:
    """'pods' -> 'pods'; 'sqls.devopstoolkit.live' -> 'SQLS'."""
    if "." not in resource_name:
        return resource_name
    return resource_name.split(".")[0].upper()


def extract_group_from_resource_name(resource_name: str) -> str:
    """'sqls.devopstoolkit.live' -> 'devopstoolkit.live'; un-dotted names are core."""
    if "." not in resource_name:
        return "core"
    return resource_name.split(".", 1)[1]


def default_cluster_options() -> ClusterOptions:
    return ClusterOptions(namespaces=["default"])


class ResourceRecommender:
    """Turn a free-text deployment intent into ranked Kubernetes solutions."""

    def __init__(
        self,
        ai_provider: AIProvider,
        capability_service: Optional[CapabilityVectorService],
        pattern_service: Optional[PatternVectorService] = None,
        policy_service: Optional[PolicyVectorService] = None,
        cluster_discovery: Optional[ClusterDiscovery] = None,
        debug_mode: bool = False,
        capability_limit: int = 50,
        pattern_limit: int = 5,
        policy_limit: int = 50,
    ) -> None:
        self.ai_provider = ai_provider
        self.capability_service = capability_service
        self.pattern_service = pattern_service
        self.policy_service = policy_service
        self.cluster_discovery = cluster_discovery
        self.debug_mode = debug_mode
        self.capability_limit = capability_limit
        self.pattern_limit = pattern_limit
        self.policy_limit = policy_limit

        for name, service in (("pattern", pattern_service), ("policy", policy_service)):
            if service is None:
                recommender_logger.log_structured(
                    level="INFO",
                    message=f"{name.capitalize()} service unavailable, recommendations proceed without {name}s",
                )

    async def find_best_solutions(self, intent: str, explain_resource: ExplainResource) -> SolutionResult:
        """
        Run the full pipeline for one intent.

        Args:
            intent: User's deployment intent
            explain_resource: Async lookup returning schema text for a resourceName

        Returns:
            SolutionResult with solutions in the order the model ranked them
        """
        if not self.ai_provider.is_initialized():
            raise AIProviderNotInitializedError(
                "AI provider not initialized. API key required for AI-powered resource ranking."
            )

        capability_results, patterns = await asyncio.gather(
            run_stage(Stage.CAPABILITY_SEARCH, lambda: self._search_capabilities(intent)),
            run_stage(Stage.PATTERN_SEARCH, lambda: self._search_patterns(intent), fallback=list),
        )

        candidates = add_pattern_resources(self._build_candidates(capability_results), patterns)
        recommender_logger.log_structured(
            level="INFO",
            message="Knowledge gathered",
            extra={
                "capabilities": len(capability_results),
                "patterns": len(patterns),
                "candidates": len(candidates),
            }
        )

        result: SolutionResult = await run_stage(
            Stage.SOLUTION_ASSEMBLY,
            lambda: self._assemble_solutions(intent, candidates, patterns),
        )

        if result.helm_recommendation is not None and not result.solutions:
            recommender_logger.log_structured(
                level="INFO",
                message="Helm installation recommended",
                extra={"suggested_tool": result.helm_recommendation.suggested_tool}
            )
            return result

        if not result.solutions:
            return result

        cluster_options = await run_stage(
            Stage.CLUSTER_DISCOVERY, self._discover_cluster_options, fallback=default_cluster_options
        )

        for solution in result.solutions:
            await run_stage(Stage.PATTERN_INJECTION, lambda: self._inject_patterns(solution, patterns))
            await run_stage(Stage.SCHEMA_ENRICHMENT, lambda: self._enrich_schemas(solution, explain_resource))
            solution.questions = await run_stage(
                Stage.QUESTION_GENERATION,
                lambda: self._generate_questions(intent, solution, cluster_options),
                fallback=QuestionGroup.fallback,
            )

        return result

    async def _search_capabilities(self, intent: str) -> List[BaseSearchResult[ResourceCapability]]:
        if self.capability_service is None:
            raise CapabilityServiceUnavailableError(
                f'Capability service not available for intent "{intent}". {SCAN_HINT} '
                "A vector database is required for capability-based recommendations."
            )

        try:
            results = await self.capability_service.search_capabilities(intent, limit=self.capability_limit)
        except Exception as e:
            raise CapabilitySearchError(
                f'Capability search failed for intent "{intent}". {SCAN_HINT} Error: {e}'
            ) from e

        if not results:
            raise NoCapabilitiesFoundError(f'No capabilities found for "{intent}". {SCAN_HINT}')
        return results

    async def _search_patterns(self, intent: str) -> List[OrganizationalPattern]:
        if self.pattern_service is None:
            return []
        results = await self.pattern_service.search_patterns(intent, limit=self.pattern_limit)
        return [r.data for r in results]

    @staticmethod
    def _build_candidates(results: List[BaseSearchResult[ResourceCapability]]) -> List[ResourceCandidate]:
        candidates = []
        for result in results:
            capability = result.data
            name = capability.resource_name
            candidates.append(ResourceCandidate(
                kind=extract_kind_from_resource_name(name),
                group=capability.group or extract_group_from_resource_name(name),
                api_version=capability.api_version,
                version=capability.version,
                resource_name=name,
                namespaced=capability.namespaced,
                capabilities=capability.to_metadata(),
            ))
        return candidates

    async def _assemble_solutions(
        self,
        intent: str,
        candidates: List[ResourceCandidate],
        patterns: List[OrganizationalPattern],
    ) -> SolutionResult:
        prompt = SOLUTION_ASSEMBLY_USER_PROMPT.format(
            intent=intent,
            resources=self._format_candidates(candidates),
            patterns=self._format_patterns(patterns),
        )
        response = await self.ai_provider.send_message(
            prompt,
            system_prompt=SOLUTION_ASSEMBLY_SYSTEM_PROMPT,
            operation="solution-assembly",
        )
        return self._parse_solution_response(response.content, candidates)

    def _parse_solution_response(self, content: str, candidates: List[ResourceCandidate]) -> SolutionResult:
        names = [c.resource_name for c in candidates if c.resource_name]
        try:
            parsed = SolutionAssemblyResponse.model_validate(extract_json_object(content))
        except (JSONExtractionError, ValidationError) as e:
            raise SolutionParseError(
                f"Failed to parse AI solution response: {e}\n"
                f'AI Response (first {RAW_RESPONSE_EXCERPT} chars): "{content[:RAW_RESPONSE_EXCERPT]}..."\n'
                f"Candidate resources: {', '.join(names)}",
                raw_response=content[:RAW_RESPONSE_EXCERPT],
                candidates=names,
            ) from e

        if parsed.helm_recommendation is not None and not parsed.solutions:
            return SolutionResult(solutions=[], helm_recommendation=parsed.helm_recommendation)

        by_name: Dict[str, ResourceCandidate] = {c.resource_name: c for c in candidates if c.resource_name}
        for solution in parsed.solutions:
            for resource in solution.resources:
                candidate = by_name.get(resource.resource_name)
                if candidate is None:
                    continue
                resource.capabilities = {**candidate.capabilities, **resource.capabilities}
                resource.namespaced = candidate.namespaced
                resource.api_version = resource.api_version or candidate.api_version
                resource.version = resource.version or candidate.version

        if self.debug_mode:
            recommender_logger.log_structured(
                level="DEBUG",
                message="Parsed solutions",
                extra={"solutions": json.dumps([s.model_dump(by_alias=True) for s in parsed.solutions], default=str)}
            )
        return SolutionResult(solutions=parsed.solutions, helm_recommendation=parsed.helm_recommendation)

    @staticmethod
    def _inject_patterns(solution: ResourceSolution, patterns: List[OrganizationalPattern]) -> None:
        accepted_ids = {influence.pattern_id for influence in solution.pattern_influences}
        accepted = [p for p in patterns if p.id in accepted_ids]
        if not accepted:
            return
        solution.resources = add_pattern_resources(solution.resources, accepted)
        solution.used_patterns = True

    async def _enrich_schemas(self, solution: ResourceSolution, explain_resource: ExplainResource) -> None:
        """
        Attach ``rawExplanation`` to every resource in the solution.

        Raises:
            MissingResourceNameError: A resource has no resourceName
            SchemaFetchError: Every schema lookup failed
        """
        for resource in solution.resources:
            if not resource.resource_name:
                raise MissingResourceNameError(
                    f"Resource {resource.kind} is missing resourceName field. "
                    "This indicates a bug in solution construction."
                )
        if not solution.resources:
            return

        explanations = await asyncio.gather(
            *(explain_resource(r.resource_name) for r in solution.resources),
            return_exceptions=True,
        )

        errors = []
        for resource, explanation in zip(solution.resources, explanations):
            if isinstance(explanation, Exception):
                errors.append(f"{resource.resource_name}: {explanation}")
            else:
                resource.raw_explanation = explanation if isinstance(explanation, str) else json.dumps(explanation)

        if len(errors) == len(solution.resources):
            raise SchemaFetchError(f"Could not fetch schema for any resource: {'; '.join(errors)}", errors=errors)
        if errors:
            recommender_logger.log_structured(
                level="WARNING",
                message="Some resource schemas could not be fetched",
                extra={"errors": errors}
            )

    async def _generate_questions(
        self, intent: str, solution: ResourceSolution, cluster_options: ClusterOptions
    ) -> QuestionGroup:
        policy_results = await run_stage(
            Stage.POLICY_SEARCH, lambda: self._search_policies(intent, solution), fallback=list
        )

        prompt = QUESTION_GENERATION_USER_PROMPT.format(
            intent=intent,
            solution_description=solution.description,
            resource_details=self._format_resource_details(solution.resources),
            cluster_options=format_cluster_options(cluster_options),
            policy_context=self._format_policies(policy_results),
        )
        response = await self.ai_provider.send_message(
            prompt,
            system_prompt=QUESTION_GENERATION_SYSTEM_PROMPT,
            operation="question-generation",
        )

        data = extract_json_object(response.content)
        missing = [tier for tier in QUESTION_TIERS if tier not in data]
        if missing:
            raise ValueError(f"Invalid question structure from AI, missing: {', '.join(missing)}")

        questions = inject_cluster_options(QuestionGroup.model_validate(data), cluster_options)
        questions.relevant_policies = [r.data.id for r in policy_results]
        return questions

    async def _search_policies(self, intent: str, solution: ResourceSolution) -> List[BaseSearchResult[PolicyIntent]]:
        if self.policy_service is None:
            return []
        resource_context = " ".join(
            f"{r.kind} {r.capabilities.get('description', '')}".strip() for r in solution.resources
        )
        return await self.policy_service.search_policy_intents(
            f"{intent} {resource_context}".strip(), limit=self.policy_limit
        )

    async def _discover_cluster_options(self) -> ClusterOptions:
        if self.cluster_discovery is None:
            return default_cluster_options()
        return await self.cluster_discovery()

    @staticmethod
    def _format_candidates(candidates: List[ResourceCandidate]) -> str:
        blocks = []
        for index, candidate in enumerate(candidates):
            caps = candidate.capabilities
            providers = caps.get("providers") or ["kubernetes"]
            blocks.append(
                f"{index}: {candidate.kind.upper()}\n"
                f"   Group: {candidate.group or 'core'}\n"
                f"   API Version: {candidate.api_version or 'unknown'}\n"
                f"   Resource Name: {candidate.resource_name}\n"
                f"   Namespaced: {candidate.namespaced}\n"
                f"   Capabilities: {', '.join(caps.get('capabilities') or []) or 'Not specified'}\n"
                f"   Providers: {', '.join(providers)}\n"
                f"   Complexity: {caps.get('complexity', 'medium')}\n"
                f"   Use Case: {caps.get('useCase') or caps.get('description') or 'General purpose'}\n"
                f"   Description: {caps.get('description') or 'Kubernetes resource'}\n"
                f"   Confidence: {caps.get('confidence', 1.0)}"
            )
        return "\n\n".join(blocks)

    @staticmethod
    def _format_patterns(patterns: List[OrganizationalPattern]) -> str:
        if not patterns:
            return "No organizational patterns found for this request."
        return "\n".join(
            f"- ID: {p.id}\n"
            f"  Description: {p.description}\n"
            f"  Suggested Resources: {', '.join(p.suggested_resources) or 'Not specified'}\n"
            f"  Rationale: {p.rationale}\n"
            f"  Triggers: {', '.join(p.triggers) or 'None'}"
            for p in patterns
        )

    @staticmethod
    def _format_resource_details(resources: List[ResourceCandidate]) -> str:
        details = []
        for resource in resources:
            description = resource.capabilities.get("description", "")
            header = f"{resource.kind} ({resource.api_version or resource.group}):\n  Description: {description}"
            if resource.raw_explanation:
                details.append(f"{header}\n\n  Complete Schema Information:\n{resource.raw_explanation}")
            else:
                details.append(f"{header}\n  Schema: not available")
        return "\n\n".join(details)

    @staticmethod
    def _format_policies(results: List[BaseSearchResult[PolicyIntent]]) -> str:
        if not results:
            return "No organizational policies found for this request."
        return "\n".join(
            f"- ID: {r.data.id}\n"
            f"  Description: {r.data.description}\n"
            f"  Rationale: {r.data.rationale}\n"
            f"  Triggers: {', '.join(r.data.triggers) or 'None'}\n"
            f"  Score: {r.score:.3f} ({r.match_type.value})"
            for r in results
        )
