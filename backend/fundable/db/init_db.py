from sqlalchemy.ext.asyncio import AsyncEngine

from fundable.db.base_class import Base
from fundable.db.session import engine as default_engine

# Model modules register their tables on Base.metadata when imported
from fundable.domains.companies.models import Company, IncomeRecord  # noqa: F401


async def init_db(engine: AsyncEngine = default_engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
