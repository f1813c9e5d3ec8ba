"""
Core module for K8s Advisor.

This module contains the recommendation pipeline, the Qdrant-backed
organizational knowledge stores, and the LLM and embedding boundaries.
"""

from k8s_advisor.core.recommender import ResourceRecommender, create_resource_recommender
from k8s_advisor.core.vector import (
    CapabilityVectorService,
    PatternVectorService,
    PolicyVectorService,
    VectorDBService,
)

__all__ = [
    # Recommendation
    "ResourceRecommender",
    "create_resource_recommender",
    # Knowledge stores
    "CapabilityVectorService",
    "PatternVectorService",
    "PolicyVectorService",
    "VectorDBService",
]
