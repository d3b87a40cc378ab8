from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from informes.config import settings

# SQLite: uma conexão por sessão, sem reaproveitar entre event loops
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    poolclass=NullPool if settings.DATABASE_URL.startswith("sqlite") else None,
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def init_db():
    # importa os modelos para registrar as tabelas no metadata
    import informes.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
