"""Lazily created Supabase client shared by the project and auth services."""
from supabase import create_client, Client
from app.config import settings


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client


def get_supabase() -> Client:
    return SupabaseClient.get_client()
