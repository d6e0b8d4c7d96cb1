"""Account seeding interface."""

from abc import ABC, abstractmethod

from tracker.domain.value import UserId


class AccountSeeder(ABC):
    """Hook owned by expense management that prepares a brand-new account.

    Called exactly once per user, inside the transaction that creates the
    user, so a failure here rolls the whole creation back.
    """

    @abstractmethod
    async def seed_new_user(self, user_id: UserId) -> None:
        """Write default categories and the default classification prompt.

        Args:
            user_id: The freshly created user
        """
        pass
