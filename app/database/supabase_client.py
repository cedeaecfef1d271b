from supabase import create_client, Client, ClientOptions
from app.config import settings


class SupabaseClient:
    """Process-wide Supabase handles, created once on first use."""

    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        """Client with the public/anon key. Only used for password sign-in."""
        if cls._client is None:
            cls._client = create_client(
                settings.supabase_url,
                settings.supabase_key,
                options=ClientOptions(auto_refresh_token=False, persist_session=False),
            )
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS and exposes auth.admin."""
        if cls._service_client is None:
            if not settings.supabase_service_role_key:
                raise RuntimeError(
                    "SUPABASE_SERVICE_ROLE_KEY is not set. "
                    "The admin API cannot verify tokens or manage users without it."
                )
            cls._service_client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key,
                options=ClientOptions(auto_refresh_token=False, persist_session=False),
            )
        return cls._service_client

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_supabase_admin() -> Client:
    return SupabaseClient.get_service_client()
