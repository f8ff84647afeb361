"""Services package - discovery and execution business logic."""

from curator.services.execution import ExecutionCoordinator
from curator.services.merge import MergeEngine
from curator.services.query_sets import QuerySetService
from curator.services.ranking import RankingWeights, SimilarityRanker
from curator.services.registry import SourceRegistryService
from curator.services.schema_cache import SchemaCache
from curator.services.transformation import (
    Transform,
    TransformationInterpreter,
    TransformRegistry,
)

__all__ = [
    "ExecutionCoordinator",
    "MergeEngine",
    "QuerySetService",
    "RankingWeights",
    "SimilarityRanker",
    "SourceRegistryService",
    "SchemaCache",
    "Transform",
    "TransformationInterpreter",
    "TransformRegistry",
]
