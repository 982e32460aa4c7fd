import logging
from fastapi import FastAPI
from .config import Config
from .api.endpoints import health, products
from .db import create_supabase_client
from .logging_config import setup_logging
from .services import gemini_service, openai_service
from .services.description_cache import EnhancementCache, SupabaseCacheStore
from .services.enhancement_service import DescriptionEnhancer
from .services.generation_service import GenerationClient
from .services.metrics_service import MetricsRecorder
from .services.product_service import InMemoryProductRepository, ProductRepository, SupabaseProductRepository

logger = logging.getLogger(__name__)


def build_enhancer(metrics: MetricsRecorder, supabase_client=None) -> DescriptionEnhancer:
    """
    Wires the generation client and the two-tier cache. Any problem building the
    AI client leaves enhancement disabled instead of stopping the service.
    """
    if not Config.ai_enabled():
        logger.info(f"No credentials for '{Config.GENERATION_PROVIDER}', AI descriptions disabled.")
        return DescriptionEnhancer(cache=None, generator=None, metrics=metrics)

    logger.info(f"Initializing '{Config.GENERATION_PROVIDER}' generation client...")
    try:
        if Config.GENERATION_PROVIDER == "gemini":
            chat = gemini_service.create_chat_service()
        else:
            chat = openai_service.create_chat_service()
    except Exception as e:
        logger.warning(f"Failed to initialize AI client, AI descriptions disabled: {e}")
        return DescriptionEnhancer(cache=None, generator=None, metrics=metrics)

    durable = SupabaseCacheStore(supabase_client, table=Config.CACHE_TABLE) if supabase_client else None
    cache = EnhancementCache(durable=durable)
    logger.info(f"AI client and cache initialized ({cache.mode}).")
    return DescriptionEnhancer(cache=cache, generator=GenerationClient(chat), metrics=metrics)


def create_app(
    product_repository: ProductRepository | None = None,
    enhancer: DescriptionEnhancer | None = None,
    metrics: MetricsRecorder | None = None,
) -> FastAPI:
    """
    Builds the FastAPI app and the collaborators it owns. Anything passed in is
    used as is, which is how the tests swap in fakes.
    """
    setup_logging(Config.LOG_LEVEL)
    Config.validate()

    # /metrics must expose the registry the enhancer records into
    if enhancer is not None:
        if metrics is not None and metrics is not enhancer.metrics:
            raise ValueError("metrics must be the recorder the enhancer was built with.")
        metrics = enhancer.metrics
    metrics = metrics or MetricsRecorder()

    supabase_client = None
    if Config.supabase_enabled() and (product_repository is None or enhancer is None):
        supabase_client = create_supabase_client()

    if product_repository is None:
        if supabase_client is not None:
            logger.info(f"Using Supabase table '{Config.PRODUCTS_TABLE}' for products.")
            product_repository = SupabaseProductRepository(supabase_client, table=Config.PRODUCTS_TABLE)
        else:
            logger.warning("SUPABASE_URL/SUPABASE_KEY not set, serving an empty in-memory catalog.")
            product_repository = InMemoryProductRepository()

    if enhancer is None:
        enhancer = build_enhancer(metrics, supabase_client)

    app = FastAPI(
        title="Storefront Products",
        description="Product catalog API with cached AI-generated descriptions.",
        version=Config.VERSION
    )
    app.state.products = product_repository
    app.state.enhancer = enhancer
    app.state.metrics = metrics
    app.state.request_timeout = Config.REQUEST_TIMEOUT_SECONDS

    @app.get("/")
    def read_root():
        """
        Root endpoint to check API status.
        """
        return {"status": "ok", "message": f"{Config.SERVICE_NAME} service is online."}

    app.include_router(health.router)
    app.include_router(products.router)
    return app


app = create_app()
