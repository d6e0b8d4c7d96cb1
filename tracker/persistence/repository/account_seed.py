"""PostgreSQL implementation of the account seeding hook."""

from uuid import uuid4

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.domain.repository import AccountSeeder
from tracker.domain.value import UserId
from tracker.domain.value.defaults import (
    DEFAULT_CATEGORIES,
    DEFAULT_CLASSIFICATION_PROMPT,
)
from tracker.persistence.tables import categories_table, user_prompts_table


class PostgresAccountSeeder(AccountSeeder):
    """Writes account defaults on the same session as the user insert."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize seeder with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def seed_new_user(self, user_id: UserId) -> None:
        """Insert default categories and the default classification prompt."""
        await self.session.execute(
            categories_table.insert(),
            [
                {"id": uuid4(), "user_id": user_id, "name": name}
                for name in DEFAULT_CATEGORIES
            ],
        )
        await self.session.execute(
            user_prompts_table.insert().values(
                id=uuid4(),
                user_id=user_id,
                prompt=DEFAULT_CLASSIFICATION_PROMPT,
                is_default=True,
            )
        )
        logfire.info(
            "Account defaults seeded",
            user_id=str(user_id),
            categories=len(DEFAULT_CATEGORIES),
        )
