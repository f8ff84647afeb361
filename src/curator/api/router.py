"""API router configuration."""

from fastapi import APIRouter

from curator.api.endpoints import embeddings, health, queries, subgraphs

# Main API router with version prefix
api_router = APIRouter(prefix="/api/v1")
api_router.include_router(subgraphs.router)
api_router.include_router(queries.router)
api_router.include_router(embeddings.router)

# Health router at root level
health_router = health.router
