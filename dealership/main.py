from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dealership.api.admin import router as admin_router
from dealership.api.auth import router as auth_router
from dealership.api.customers import router as customers_router
from dealership.api.feedback import router as feedback_router
from dealership.api.orders import router as orders_router
from dealership.api.payments import router as payments_router
from dealership.api.promotions import router as promotions_router
from dealership.api.public import router as public_router
from dealership.api.sales import router as sales_router
from dealership.api.schedules import router as schedules_router
from dealership.api.vehicles import router as vehicles_router
from dealership.config import settings
from dealership.core.auth_filter import install_auth_middleware
from dealership.core.database import Base, async_session_maker, engine
from dealership.core.logging_config import get_logger, setup_logging
from dealership.core.permissions import RoleName
from dealership.dao import users as users_dao
from dealership.models import UserAccount
from dealership.schemas.common import error_body
from dealership.services.auth_service import hash_password

setup_logging()
logger = get_logger(__name__)


async def ensure_superuser():
    """Create the roles and the bootstrap ADMIN account if they are missing."""
    async with async_session_maker() as session:
        await users_dao.ensure_roles(session)
        if await users_dao.get_user_by_username(session, settings.superuser_login) is None:
            session.add(UserAccount(
                username=settings.superuser_login,
                password_hash=hash_password(settings.superuser_password),
                is_active=True,
                roles=await users_dao.get_roles(session, [RoleName.ADMIN]),
            ))
            logger.info("Superuser created: %s", settings.superuser_login)
        await session.commit()


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables checked")
    try:
        await ensure_superuser()
    except Exception as e:
        logger.warning("Superuser bootstrap failed: %s", e)
    yield
    await engine.dispose()


app = FastAPI(title="Dealership backend", version="1.0.0", lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'invalid value')}" if field else "Invalid request"
    return JSONResponse(status_code=400, content=error_body(message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    detail = "Internal server error"
    err_str = str(exc).lower()
    if "duplicate key" in err_str or "unique constraint" in err_str:
        detail = "Data conflict (duplicate)"
    elif "foreign key" in err_str:
        detail = "Referenced record does not exist"
    return JSONResponse(status_code=500, content=error_body(detail))


install_auth_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(public_router)
app.include_router(orders_router)
app.include_router(payments_router)
app.include_router(customers_router)
app.include_router(sales_router)
app.include_router(vehicles_router)
app.include_router(promotions_router)
app.include_router(schedules_router)
app.include_router(feedback_router)
app.include_router(admin_router)


@app.get("/health")
def health():
    return {"status": "ok"}
