from supabase import create_client, Client
from app.config import settings
import logging

logger = logging.getLogger(__name__)


class SupabaseClient:
    _service_client: Client = None

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS and can call the auth admin API."""
        if cls._service_client is None:
            key = settings.supabase_service_role_key or settings.supabase_key
            if not settings.supabase_url or not key:
                raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be configured")
            if not settings.supabase_service_role_key:
                logger.warning("SUPABASE_SERVICE_ROLE_KEY not set; auth admin calls will fail")
            try:
                cls._service_client = create_client(settings.supabase_url, key)
            except Exception as e:
                # supabase raises SupabaseException for a malformed URL or key
                raise RuntimeError(f"Could not create Supabase client: {e}") from e
        return cls._service_client

    @classmethod
    def reset_client(cls):
        cls._service_client = None


def get_supabase() -> Client:
    """Request dependency; services receive the client explicitly through Depends."""
    return SupabaseClient.get_service_client()
