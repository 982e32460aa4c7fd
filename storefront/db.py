# storefront/db.py
import logging
from supabase import create_client, Client
from .config import Config, ConfigError

logger = logging.getLogger(__name__)


def create_supabase_client() -> Client:
    """Builds the Supabase client shared by the product repository and the durable cache."""
    if not Config.SUPABASE_URL or not Config.SUPABASE_KEY:
        raise ConfigError("SUPABASE_URL and SUPABASE_KEY must be set in the environment.")

    client = create_client(Config.SUPABASE_URL, Config.SUPABASE_KEY)
    logger.info("Supabase client initialized successfully.")
    return client
