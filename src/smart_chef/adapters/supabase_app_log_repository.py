"""Supabase repository for application log entries."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from smart_chef.services.app_log import AppLogRepository


@dataclass
class SupabaseAppLogRepository(AppLogRepository):
    """Supabase-backed application log repository."""

    client: Client

    def create_entry(self, level: str, message: str, created_at: datetime) -> None:
        """Insert an app log row."""
        self.client.table("app_logs").insert(
            {
                "level": level,
                "message": message,
                "created_at": created_at.isoformat(),
            }
        ).execute()
