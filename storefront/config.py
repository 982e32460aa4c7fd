import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class ConfigError(ValueError):
    """Raised when the environment describes an unusable configuration."""


class Config:
    """
    Loads configuration settings from environment variables.
    """
    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "products")
    VERSION: str = "0.1.0"

    # Supabase (products table and durable description cache)
    SUPABASE_URL: str | None = os.getenv("SUPABASE_URL")
    SUPABASE_KEY: str | None = os.getenv("SUPABASE_KEY")
    PRODUCTS_TABLE: str = os.getenv("PRODUCTS_TABLE", "products")
    CACHE_TABLE: str = os.getenv("CACHE_TABLE", "ai_descriptions")

    # AI Services
    GENERATION_PROVIDER: str = os.getenv("GENERATION_PROVIDER", "openai").lower()
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    AZURE_OPENAI_ENDPOINT: str | None = os.getenv("AZURE_OPENAI_ENDPOINT")
    AZURE_OPENAI_DEPLOYMENT: str | None = os.getenv("AZURE_OPENAI_DEPLOYMENT")
    AZURE_OPENAI_API_KEY: str | None = os.getenv("AZURE_OPENAI_API_KEY")
    AZURE_OPENAI_API_VERSION: str = os.getenv("AZURE_OPENAI_API_VERSION", "2024-06-01")
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Upper bound on a single request, inherited by the generation call
    REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def supabase_enabled(cls) -> bool:
        return bool(cls.SUPABASE_URL and cls.SUPABASE_KEY)

    @classmethod
    def ai_enabled(cls) -> bool:
        """True when the selected generation provider has credentials to work with."""
        if cls.GENERATION_PROVIDER == "gemini":
            return bool(cls.GEMINI_API_KEY)
        return bool(cls.AZURE_OPENAI_ENDPOINT or cls.OPENAI_API_KEY)

    @classmethod
    def validate(cls) -> None:
        """Checks the combinations that cannot work, before anything is built."""
        if cls.GENERATION_PROVIDER not in ("openai", "gemini"):
            raise ConfigError(
                f"GENERATION_PROVIDER must be 'openai' or 'gemini', got '{cls.GENERATION_PROVIDER}'."
            )
        if cls.AZURE_OPENAI_ENDPOINT and not cls.AZURE_OPENAI_DEPLOYMENT:
            raise ConfigError("AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_DEPLOYMENT must be set together.")
        if cls.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ConfigError("REQUEST_TIMEOUT_SECONDS must be positive.")
