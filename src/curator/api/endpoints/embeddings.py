"""Embedding generation endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from curator.api.dependencies import get_embedding_client
from curator.clients import EmbeddingClient
from curator.schemas import EmbeddingRequest, EmbeddingResponse, ErrorResponse

router = APIRouter(prefix="/embeddings", tags=["embeddings"])


@router.post(
    "/generate",
    response_model=EmbeddingResponse,
    responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def generate_embedding(
    request: EmbeddingRequest,
    client: Annotated[EmbeddingClient, Depends(get_embedding_client)],
) -> EmbeddingResponse:
    """Compute the embedding of a text with the configured provider."""
    embedding = await client.embed(request.input)
    return EmbeddingResponse(embedding=embedding, text=request.input)
