"""Shared pytest fixtures and configuration."""

import os
import tempfile
from collections.abc import Generator

# Point the application engine at a throwaway database - must be set before
# curator imports, since Settings() is read when the engine is created.
_TEST_DB_FILE = os.path.join(tempfile.mkdtemp(prefix="curator-tests-"), "app.db")
os.environ.setdefault("CURATOR_DATABASE_URL", f"sqlite:///{_TEST_DB_FILE}")
os.environ.setdefault("CURATOR_EMBEDDING_API_KEY", "test-embedding-key")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from curator.database.models import Base
from curator.repositories import StoredQueryRepository, SubgraphRepository
from curator.schemas import FieldMapping, SourceCreate, SourceQuerySpec
from curator.services import TransformationInterpreter, TransformRegistry


@pytest.fixture
def test_db_url() -> Generator[str, None, None]:
    """Create a test database URL with a temporary SQLite file."""
    with tempfile.NamedTemporaryFile(delete=False, suffix=".db") as tmp_file:
        path = tmp_file.name
    yield f"sqlite:///{path}"
    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def test_engine(test_db_url: str):
    """Create a test database engine."""
    engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
        echo=False,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def test_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session with tables."""
    Base.metadata.create_all(bind=test_engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def subgraph_repository(test_session: Session) -> SubgraphRepository:
    return SubgraphRepository(test_session)


@pytest.fixture
def query_repository(test_session: Session) -> StoredQueryRepository:
    return StoredQueryRepository(test_session)


@pytest.fixture
def interpreter() -> TransformationInterpreter:
    return TransformationInterpreter(TransformRegistry.default())


@pytest.fixture
def sample_sources() -> list[SourceCreate]:
    """Three registered subgraphs with distinct endpoints."""
    return [
        SourceCreate(
            id="aave-v3-arbitrum",
            name="Aave V3 Arbitrum",
            url="https://subgraphs.test/aave-v3-arbitrum",
            protocol="aave",
            chain="arbitrum",
            queries_per_day=12000,
            stake_amount=500,
            entities=["markets"],
        ),
        SourceCreate(
            id="compound-v3-base",
            name="Compound V3 Base",
            url="https://subgraphs.test/compound-v3-base",
            protocol="compound",
            chain="base",
            queries_per_day=8000,
            stake_amount=300,
            entities=["markets"],
        ),
        SourceCreate(
            id="uniswap-v3-base",
            name="Uniswap V3 Base",
            url="https://subgraphs.test/uniswap-v3-base",
            protocol="uniswap",
            chain="base",
            queries_per_day=50000,
            stake_amount=1000,
            entities=["pools"],
        ),
    ]


@pytest.fixture
def market_spec() -> SourceQuerySpec:
    """A spec mapping lending market fields to unified columns."""
    return SourceQuerySpec(
        source_id="aave-v3-arbitrum",
        query="{ markets(first: 10) { name totalValueLockedUSD rates { rate } } }",
        mappings=[
            FieldMapping(field="name", alias="market"),
            FieldMapping(field="totalValueLockedUSD", alias="tvl", transformation="parseFloat"),
            FieldMapping(field="rates.0.rate", alias="apy", transformation="parseFloat"),
        ],
    )
