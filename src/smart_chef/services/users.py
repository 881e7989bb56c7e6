"""User profile lookups used by meal generation."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol


class UserRepository(Protocol):
    """Persistence interface for user profile data."""

    def get_daily_calorie_target(self, user_id: int) -> Decimal | None:
        """Return the user's stored daily calorie target, if any."""


@dataclass
class UserService:
    """Application service for user profile reads."""

    repository: UserRepository

    def get_calorie_target(self, user_id: int | None) -> Decimal | None:
        """Return a positive stored calorie target for the user, if present."""
        if user_id is None:
            return None
        target = self.repository.get_daily_calorie_target(user_id)
        if target is None or target <= 0:
            return None
        return target
