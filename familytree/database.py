from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from familytree.config import get_settings
from urllib.parse import urlparse, urlencode, parse_qs, urlunparse

settings = get_settings()

def build_engine_url(raw_url: str):
    """
    Normalizes DATABASE_URL for the async drivers.

    Postgres:
    - postgres:// and postgresql:// become postgresql+asyncpg://
    - ?sslmode=require is stripped and passed to asyncpg as connect_args
    SQLite:
    - sqlite:// becomes sqlite+aiosqlite://
    - connections may be shared across threads (tests, local runs)
    """
    if raw_url.startswith("postgres://"):
        raw_url = raw_url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif raw_url.startswith("postgresql://"):
        raw_url = raw_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif raw_url.startswith("sqlite://"):
        raw_url = raw_url.replace("sqlite://", "sqlite+aiosqlite://", 1)

    if raw_url.startswith("sqlite+aiosqlite://"):
        return raw_url, {"check_same_thread": False}

    parsed = urlparse(raw_url)
    query_params = parse_qs(parsed.query)
    sslmode = query_params.pop("sslmode", [None])[0]
    clean_url = urlunparse(parsed._replace(query=urlencode({k: v[0] for k, v in query_params.items()})))

    connect_args = {}
    if sslmode == "require":
        connect_args["ssl"] = "require"

    return clean_url, connect_args

database_url, connect_args = build_engine_url(settings.DATABASE_URL)

# SQL echo only when debugging locally
engine = create_async_engine(
    database_url,
    echo=settings.LOG_LEVEL.upper() == "DEBUG" and settings.ENVIRONMENT == "development",
    connect_args=connect_args,
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

Base = declarative_base()

async def init_models():
    # Registers every table on Base.metadata before create_all
    from familytree.models import event, note, person, tree, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return list(Base.metadata.tables.keys())

async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
