# productstore/main.py
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import ServiceConfig, get_config
from .core import ErrorKind, Result, StoreError, validation_error
from .database import ProductStore
from .log import configure_logging, get_logger
from .models import HealthResponse

logger = get_logger("http")

SERVICE_NAME = "product-store"


# ---------------------------
# Result -> response mapping
# ---------------------------
def _to_json(value: Any) -> Any:
    if hasattr(value, "to_json"):
        return value.to_json()
    if isinstance(value, list):
        return [_to_json(v) for v in value]
    return value


def error_response(error: StoreError) -> Response:
    """The single place a domain error becomes an HTTP response."""
    if error.kind is ErrorKind.NOT_FOUND:
        return PlainTextResponse(error.message, status_code=error.status_code)
    return JSONResponse({"error": error.message}, status_code=error.status_code)


def respond(result: Result, status_code: int = 200) -> Response:
    if not result.ok:
        return error_response(result.error)
    return JSONResponse(_to_json(result.value), status_code=status_code)


def internal_error_response(exc: Exception) -> JSONResponse:
    status = getattr(exc, "status_code", None)
    if not isinstance(status, int):
        status = 500
    message = str(exc) if status != 500 else "Something went wrong"
    return JSONResponse(
        {"error": {"name": type(exc).__name__, "message": message or "Something went wrong",
                   "statusCode": status}},
        status_code=status,
    )


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


# ---------------------------
# Product endpoints
# ---------------------------
router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
async def list_products(
    category: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    store: ProductStore = Depends(get_store),
):
    return respond(store.list_products(category=category, page=page, limit=limit))


# search and stats must be registered before /{product_id}
@router.get("/search")
async def search_products(name: Optional[str] = None, store: ProductStore = Depends(get_store)):
    return respond(store.search_products(name))


@router.get("/stats")
async def product_stats(store: ProductStore = Depends(get_store)):
    return respond(store.category_stats())


@router.get("/{product_id}")
async def get_product(product_id: str, store: ProductStore = Depends(get_store)):
    return respond(store.get_product(product_id))


@router.post("")
async def create_product(payload: Any = Body(None), store: ProductStore = Depends(get_store)):
    return respond(store.create_product(payload), status_code=201)


@router.put("/{product_id}")
async def update_product(product_id: str, payload: Any = Body(None),
                         store: ProductStore = Depends(get_store)):
    return respond(store.update_product(product_id, payload))


@router.delete("/{product_id}")
async def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
    return respond(store.delete_product(product_id))


# ---------------------------
# App factory
# ---------------------------
def create_app(store: Optional[ProductStore] = None, config: Optional[ServiceConfig] = None) -> FastAPI:
    cfg = config or get_config()
    configure_logging(cfg.log_level)
    app = FastAPI(title=cfg.title, version="0.1.0")
    app.state.store = store if store is not None else ProductStore(seed=cfg.seed)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        ts = datetime.now(timezone.utc).isoformat()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("unhandled error on %s %s", request.method, request.url.path)
            response = internal_error_response(exc)
        logger.info("[%s] %s %s -> %d", ts, request.method, request.url.path, response.status_code)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def route_not_found(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return JSONResponse({"error": "Route not found"}, status_code=404)
        return internal_error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def bad_body(request: Request, exc: RequestValidationError):
        # undecodable JSON gets the generic error envelope
        errors = exc.errors()
        if errors and errors[0].get("type") == "json_invalid":
            return JSONResponse(
                {"error": {"name": "JSONDecodeError", "message": errors[0].get("msg", "JSON decode error"),
                           "statusCode": 400}},
                status_code=400,
            )
        return error_response(validation_error().error)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Hello World"

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(status="ok", service=SERVICE_NAME)

    app.include_router(router)
    return app


app = create_app()


def serve() -> None:
    cfg = get_config()
    log = configure_logging(cfg.log_level)
    import uvicorn
    log.info("Product store listening on http://%s:%d", cfg.host, cfg.port)
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_level=cfg.log_level.lower())


if __name__ == "__main__":
    serve()
