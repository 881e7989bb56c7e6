"""Supabase-backed user repository."""

from dataclasses import dataclass
from decimal import Decimal

from supabase import Client

from smart_chef.domain.nutrition import parse_decimal
from smart_chef.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user profile reads."""

    client: Client

    def get_daily_calorie_target(self, user_id: int) -> Decimal | None:
        """Return the stored daily calorie target for a user, if present."""
        response = (
            self.client.table("users")
            .select("id, daily_calorie_target")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        target = response.data[0].get("daily_calorie_target")
        if target is None:
            return None
        return parse_decimal(target)
