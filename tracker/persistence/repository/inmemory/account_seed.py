"""In-memory account seeder for testing."""

from tracker.domain.repository import AccountSeeder
from tracker.domain.value import UserId
from tracker.domain.value.defaults import (
    DEFAULT_CATEGORIES,
    DEFAULT_CLASSIFICATION_PROMPT,
)


class InMemoryAccountSeeder(AccountSeeder):
    """Records the defaults each user was seeded with."""

    def __init__(self) -> None:
        self.categories: dict[UserId, list[str]] = {}
        self.prompts: dict[UserId, str] = {}

    async def seed_new_user(self, user_id: UserId) -> None:
        """Seed default categories and prompt."""
        if user_id in self.categories:
            raise ValueError(f"User {user_id} was already seeded")
        self.categories[user_id] = list(DEFAULT_CATEGORIES)
        self.prompts[user_id] = DEFAULT_CLASSIFICATION_PROMPT
