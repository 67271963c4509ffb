"""Adaptadores do Supabase: PostgREST, edge functions e realtime."""

from nexa.infra.supabase.functions_client import SupabaseFunctionsClient
from nexa.infra.supabase.realtime_feed import SupabaseChangeFeed, parse_change_payload
from nexa.infra.supabase.rest_client import PostgrestRemoteQuery, apply_filter

__all__ = [
    "PostgrestRemoteQuery",
    "SupabaseChangeFeed",
    "SupabaseFunctionsClient",
    "apply_filter",
    "parse_change_payload",
]
