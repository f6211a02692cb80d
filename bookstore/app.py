import logging
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .db import Database, get_database, get_session
from .models import Book, BookInput, ErrorResponse, HealthResponse, MessageResponse, Reservation
from .otel import configure_logging, configure_otel
from .reservations import ReservationStore, get_reservation_store
from .service import BookNotFound, BookService

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("bookstore.requests")

NOT_FOUND_MESSAGE = "book not found"

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_book_service(session=Depends(get_session)) -> BookService:
    return BookService(session)


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts) or "invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(BookNotFound)
    async def not_found_handler(request: Request, exc: BookNotFound):
        return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("storage.error", extra={"path": request.url.path})
        message = str(getattr(exc, "orig", None) or exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, message)

    @app.exception_handler(ValidationError)
    async def row_mapping_error_handler(request: Request, exc: ValidationError):
        logger.exception("storage.row_mapping_error", extra={"path": request.url.path})
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


router_v1 = APIRouter(prefix="/api/v1", tags=["v1"], responses=ERROR_RESPONSES)
root_router = APIRouter()


@root_router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    tags=["health"],
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthResponse}},
)
def health(database: Database = Depends(get_database)):
    try:
        database.ping()
    except SQLAlchemyError as exc:
        logger.warning("health.unhealthy", extra={"error": str(exc)})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"message": "unhealthy", "error": str(getattr(exc, "orig", None) or exc)},
        )
    return HealthResponse(message="healthy")


@root_router.get("/reservation_status", response_model=MessageResponse, tags=["reservations"])
def reservation_status() -> MessageResponse:
    return MessageResponse(message="room reserved successfully")


@router_v1.get("/reservations", response_model=List[Reservation], tags=["reservations"])
def list_reservations(
    date: Optional[str] = Query(default=None, description="Only reservations on this YYYY-MM-DD date"),
    store: ReservationStore = Depends(get_reservation_store),
) -> List[Reservation]:
    return store.list(date)


@router_v1.get("/categories", response_model=List[str], tags=["categories"])
def list_categories(service: BookService = Depends(get_book_service)) -> List[str]:
    return service.categories()


@router_v1.get("/books", response_model=List[Book], response_model_exclude_unset=True, tags=["books"])
def list_books(service: BookService = Depends(get_book_service)) -> List[Book]:
    return service.list_all()


@router_v1.post(
    "/books",
    response_model=Book,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    tags=["books"],
)
def create_book(payload: BookInput, service: BookService = Depends(get_book_service)) -> Book:
    return service.create(payload)


# Fixed paths must be registered before /books/{book_id}.
@router_v1.get("/books/search", response_model=List[Book], response_model_exclude_unset=True, tags=["books"])
def search_books(
    q: Optional[str] = Query(default=None, description="Keyword matched against title, author and description"),
    service: BookService = Depends(get_book_service),
) -> List[Book]:
    if not q:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing search query")
    return service.search(q)


@router_v1.get("/books/featured", response_model=List[Book], response_model_exclude_unset=True, tags=["books"])
def featured_books(service: BookService = Depends(get_book_service)) -> List[Book]:
    return service.featured()


@router_v1.get("/books/new", response_model=List[Book], response_model_exclude_unset=True, tags=["books"])
def new_books(service: BookService = Depends(get_book_service)) -> List[Book]:
    return service.new_arrivals()


@router_v1.get("/books/discounted", response_model=List[Book], response_model_exclude_unset=True, tags=["books"])
def discounted_books(service: BookService = Depends(get_book_service)) -> List[Book]:
    return service.discounted()


@router_v1.get("/books/{book_id}", response_model=Book, response_model_exclude_unset=True, tags=["books"])
def get_book(book_id: int, service: BookService = Depends(get_book_service)) -> Book:
    return service.get(book_id)


@router_v1.put("/books/{book_id}", response_model=Book, response_model_exclude_unset=True, tags=["books"])
def update_book(book_id: int, payload: BookInput, service: BookService = Depends(get_book_service)) -> Book:
    return service.update(book_id, payload)


@router_v1.delete("/books/{book_id}", response_model=MessageResponse, tags=["books"])
def delete_book(book_id: int, service: BookService = Depends(get_book_service)) -> MessageResponse:
    service.delete(book_id)
    return MessageResponse(message="book deleted successfully")


async def request_logging_middleware(request: Request, call_next):
    request_logger.info("request.start", extra={"path": request.url.path, "method": request.method})
    response = await call_next(request)
    request_logger.info(
        "request.end",
        extra={"path": request.url.path, "method": request.method, "status": response.status_code},
    )
    return response


async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    reservations: Optional[ReservationStore] = None,
) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        logger.info("startup.complete", extra={"dialect": database.engine.dialect.name})
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Bookstore catalog API with relational persistence.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.reservations = reservations or ReservationStore()

    register_error_handlers(app)
    app.include_router(root_router)
    app.include_router(router_v1)

    origins = settings.allowed_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials="*" not in origins,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type"],
        )
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(request_id_middleware)

    if settings.otel_enabled:
        configure_otel(app)
    return app


settings = get_settings()
configure_logging(settings.log_level)
app = create_app(settings)
