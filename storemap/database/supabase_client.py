"""
Supabase client for the catalog repository.
One client is kept per project URL and service key.
"""

from typing import Dict, Optional, Tuple
from supabase import create_client, Client

from storemap.config import AppConfig, get_config
from storemap.logging_config import get_logger

logger = get_logger("database.supabase")

# Clients by (url, service key)
_clients: Dict[Tuple[str, str], Client] = {}


def get_supabase(config: Optional[AppConfig] = None) -> Client:
    """
    Get the Supabase client for a configuration.

    Args:
        config: Application config (defaults to the global one)

    Returns:
        Supabase Client
    """
    if config is None:
        config = get_config()
    if not all([config.supabase_url, config.supabase_service_key]):
        raise RuntimeError("Supabase credentials are not configured")

    key = (config.supabase_url, config.supabase_service_key)
    if key not in _clients:
        _clients[key] = create_client(config.supabase_url, config.supabase_service_key)
        logger.info(f"Supabase client initialized for {config.supabase_url}")
    return _clients[key]
