"""Supabase clients shared by the API routes and the scheduled nudge functions."""

import logging
from typing import Optional

from supabase import create_client, Client
from app.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Lazily created clients.

    Request handlers use the anon-key client. The nudge functions read every
    user's settings and tokens, so they use the service-role client, which
    bypasses row-level security.
    """

    _client: Optional[Client] = None
    _service_client: Optional[Client] = None

    @staticmethod
    def _create(key: Optional[str]) -> Client:
        if not settings.supabase_url or not key:
            raise RuntimeError("SUPABASE_URL and a Supabase key must be configured")
        return create_client(settings.supabase_url, key)

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = cls._create(settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        if cls._service_client is None:
            if not settings.supabase_service_role_key:
                logger.warning("SUPABASE_SERVICE_ROLE_KEY is not set; nudge functions run under RLS")
                return cls.get_client()
            cls._service_client = cls._create(settings.supabase_service_role_key)
        return cls._service_client

    @classmethod
    def reset(cls) -> None:
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()
