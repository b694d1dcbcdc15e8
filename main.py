import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog import ProductCatalog
from config import Settings, configure_logging, get_settings
from database import connect, get_collection
from errors import CatalogError, ValidationError
from repository import MongoProductRepository, ProductRepository
from schemas import CATEGORIES

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "getAllProducts": "GET /api/products",
    "getProductById": "GET /api/products/{id}",
    "createProduct": "POST /api/products",
    "updateProduct": "PUT /api/products/{id}",
    "deleteProduct": "DELETE /api/products/{id}",
    "getProductsByCategory": "GET /api/products/category/{category}",
    "getProductsByColor": "GET /api/products/by-color/{color}",
    "getProductVariants": "GET /api/products/{id}/variants",
    "addVariant": "POST /api/products/{id}/variants",
    "updateVariantStock": "PATCH /api/products/{productId}/variants/{variantId}",
}


# ---------- Helpers ----------

def get_catalog(request: Request) -> ProductCatalog:
    repository = request.app.state.repository
    if repository is None:
        raise RuntimeError("Database not configured")
    return ProductCatalog(repository)


def listing(products, **extra) -> dict:
    return {"success": True, "count": len(products), **extra, "data": [p.to_json() for p in products]}


def failure(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


# ---------- Product Routes ----------

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
def list_products(catalog: ProductCatalog = Depends(get_catalog)):
    return listing(catalog.list_all())


@router.post("", status_code=201)
def create_product(payload: Any = Body(None), catalog: ProductCatalog = Depends(get_catalog)):
    product = catalog.create(payload)
    return {"success": True, "message": "Product created successfully", "data": product.to_json()}


@router.get("/category/{category}")
def products_by_category(category: str, catalog: ProductCatalog = Depends(get_catalog)):
    return listing(catalog.by_category(category), category=category)


@router.get("/by-color/{color}")
def products_by_color(color: str, catalog: ProductCatalog = Depends(get_catalog)):
    return listing(catalog.by_color(color), color=color)


@router.get("/{product_id}")
def get_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    return {"success": True, "data": catalog.get(product_id).to_json()}


@router.put("/{product_id}")
def update_product(product_id: str, payload: Any = Body(None), catalog: ProductCatalog = Depends(get_catalog)):
    product = catalog.update(product_id, payload)
    return {"success": True, "message": "Product updated successfully", "data": product.to_json()}


@router.delete("/{product_id}")
def delete_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    catalog.delete(product_id)
    return {"success": True, "message": "Product deleted successfully", "data": {}}


@router.get("/{product_id}/variants")
def product_variants(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    name, variants = catalog.variants(product_id)
    return {
        "success": True,
        "productName": name,
        "variantCount": len(variants),
        "variants": [v.model_dump() for v in variants],
    }


@router.post("/{product_id}/variants")
def add_variant(product_id: str, payload: Any = Body(None), catalog: ProductCatalog = Depends(get_catalog)):
    product = catalog.add_variant(product_id, payload)
    return {"success": True, "message": "Variant added successfully", "data": product.to_json()}


@router.patch("/{product_id}/variants/{variant_id}")
def update_variant_stock(
    product_id: str,
    variant_id: str,
    payload: Any = Body(None),
    catalog: ProductCatalog = Depends(get_catalog),
):
    product = catalog.update_variant_stock(product_id, variant_id, payload)
    return {"success": True, "message": "Variant stock updated successfully", "data": product.to_json()}


# ---------- App ----------

def create_app(repository: Optional[ProductRepository] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API.

    Without a repository the app connects to MongoDB on startup using
    ``settings`` and closes the client on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        if app.state.repository is None:
            client = connect(settings)
            mongo = MongoProductRepository(get_collection(client, settings))
            mongo.ensure_indexes()
            app.state.repository = mongo
        yield
        if client is not None:
            client.close()
            app.state.repository = None

    app = FastAPI(title="E-commerce Catalog API", lifespan=lifespan)
    app.state.repository = repository

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def read_root():
        return {
            "message": "Welcome to E-commerce Catalog API with Nested Documents",
            "endpoints": ENDPOINTS,
            "categories": list(CATEGORIES),
        }

    app.include_router(router)

    @app.exception_handler(CatalogError)
    async def catalog_error(request: Request, exc: CatalogError):
        if isinstance(exc, ValidationError):
            return failure(exc.status_code, exc.message, errors=exc.violations)
        return failure(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def malformed_request(request: Request, exc: RequestValidationError):
        return failure(400, "Malformed request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return failure(404, "Route not found")
        return failure(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return failure(500, "Server Error")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_settings().PORT)
