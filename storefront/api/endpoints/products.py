# storefront/api/endpoints/products.py
import logging
import time
from fastapi import APIRouter, HTTPException, Path, Request, status
from fastapi.concurrency import run_in_threadpool
from ...api import schemas
from ...services.enhancement_service import DescriptionEnhancer
from ...services.product_service import ProductRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Products"])


def _request_deadline(request: Request) -> float:
    """Monotonic deadline for this request, inherited by the generation call."""
    return time.monotonic() + request.app.state.request_timeout


@router.get(
    "/get/{product_id}",
    response_model=schemas.Product,
    summary="Return a single product, with an AI description when enabled"
)
def get_product(
    request: Request,
    product_id: str = Path(..., description="The product identifier"),
):
    repository: ProductRepository = request.app.state.products
    enhancer: DescriptionEnhancer = request.app.state.enhancer
    deadline = _request_deadline(request)

    try:
        product = repository.get_product(product_id)
    except Exception as e:
        logger.error(f"API Error fetching product '{product_id}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error.")

    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Product '{product_id}' not found.")

    product.description = enhancer.enhance(product.id, product.name, product.description, deadline=deadline)
    return product


@router.get(
    "/catalog",
    response_model=list[schemas.Product],
    summary="Return the whole product catalog"
)
async def get_catalog(request: Request):
    """
    Enhances products one at a time on the thread pool, and stops enhancing as
    soon as the client has gone away.
    """
    repository: ProductRepository = request.app.state.products
    enhancer: DescriptionEnhancer = request.app.state.enhancer
    deadline = _request_deadline(request)

    try:
        products = await run_in_threadpool(repository.all_products)
    except Exception as e:
        logger.error(f"API Error fetching catalog: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error.")

    for product in products:
        if await request.is_disconnected():
            logger.info("Client disconnected, skipping enhancement for the rest of the catalog.")
            break
        product.description = await run_in_threadpool(
            enhancer.enhance, product.id, product.name, product.description, deadline=deadline
        )
    return products
