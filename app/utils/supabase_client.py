"""
Supabase Client Configuration
Per-request clients so row-level security sees the caller's identity
"""

from typing import Optional

import structlog
from supabase import Client, create_client
from supabase.client import ClientOptions

from app.config import Settings

logger = structlog.get_logger(__name__)


class SupabaseClientFactory:
    """Builds Supabase clients for a single request"""

    def __init__(self, settings: Settings):
        self.url = settings.supabase_url
        self.key = settings.supabase_anon_key

        if not settings.supabase_configured:
            logger.warning("Supabase credentials not found in environment")

    def is_available(self) -> bool:
        """Check if Supabase is configured"""
        return bool(self.url and self.key)

    def __call__(self, access_token: Optional[str] = None) -> Client:
        """
        Create a client

        Args:
            access_token: Caller's JWT; PostgREST requests run as this user

        Returns:
            Client: Supabase client that keeps no session between requests
        """
        if not self.is_available():
            raise RuntimeError("Supabase client not available")

        client = create_client(
            self.url,
            self.key,
            options=ClientOptions(
                auto_refresh_token=False,
                persist_session=False
            )
        )

        if access_token:
            client.postgrest.auth(access_token)

        return client
