from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from strawberry.dataloader import DataLoader

from ..database.connection import session_scope
from ..dbmodels import Users


async def batch_users(
    keys: Sequence[int], session_factory: async_sessionmaker[AsyncSession]
) -> list[Users | None]:
    """Batch load users by ID with one query, in the order of ``keys``."""
    async with session_scope(session_factory) as session:
        stmt = select(Users).where(Users.id.in_(set(keys)))
        result = await session.execute(stmt)
        users = result.scalars().all()
        users_map = {user.id: user for user in users}
        return [users_map.get(key) for key in keys]


class Loaders:
    """Batch loaders for one operation; build a new instance per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.user_loader: DataLoader[int, Users | None] = DataLoader(load_fn=self._load_users)

    async def _load_users(self, keys: list[int]) -> list[Users | None]:
        return await batch_users(keys, self.session_factory)

    def clear(self) -> None:
        self.user_loader.clear_all()
