from k8s_advisor.core.recommender.factory import create_resource_recommender
from k8s_advisor.core.recommender.recommender import ResourceRecommender
from k8s_advisor.core.recommender.stage_policy import STAGE_POLICIES, Stage, StagePolicy, run_stage

__all__ = [
    "STAGE_POLICIES",
    "ResourceRecommender",
    "Stage",
    "StagePolicy",
    "create_resource_recommender",
    "run_stage",
]
