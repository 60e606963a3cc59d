# juliecraft/main.py
# type: ignore

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from juliecraft import __version__
from juliecraft.core import config
from juliecraft.core.errors import AppError
from juliecraft.core.logging import configure_logging
from juliecraft.database import create_tables, is_configured, ping

# ***************************************************************
# 1. Import every model so SQLAlchemy registers the tables
# ***************************************************************
import juliecraft.models  # noqa: F401

# ***************************************************************
# 2. Import the API routers
# ***************************************************************
from juliecraft.api.endpoints import admin
from juliecraft.api.endpoints import auth
from juliecraft.api.endpoints import cart
from juliecraft.api.endpoints import categories
from juliecraft.api.endpoints import content
from juliecraft.api.endpoints import customers
from juliecraft.api.endpoints import notifications
from juliecraft.api.endpoints import orders
from juliecraft.api.endpoints import products
from juliecraft.api.endpoints import users

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.JWT_SECRET == config.DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; using the insecure default secret")
    # Create missing tables on startup
    create_tables()
    yield


app = FastAPI(
    title="JulieCraft API",
    version=__version__,
    description="Storefront and admin dashboard backend for JulieCraft.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ***************************************************************
# 3. Error responses: always {"error": ..., "details"?: ...}
# ***************************************************************

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": details},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# ***************************************************************
# 4. Include the routers
# ***************************************************************

# Authentication
app.include_router(auth.router, tags=["Auth"], prefix="/api/auth")

# Storefront
app.include_router(products.catalog_router, tags=["Products"], prefix="/api/products")
app.include_router(categories.router, tags=["Categories"], prefix="/api/categories")
app.include_router(cart.router, tags=["Cart"], prefix="/api/cart")
app.include_router(orders.router, tags=["Orders"], prefix="/api/orders")
app.include_router(notifications.router, tags=["Notifications"], prefix="/api/notifications")
app.include_router(content.router, tags=["Site content"], prefix="/api/site-content")

# Admin
app.include_router(admin.router, tags=["Admin"], prefix="/api/admin")
app.include_router(products.router, tags=["Admin products"], prefix="/api/admin/products")
app.include_router(categories.admin_router, tags=["Admin categories"], prefix="/api/admin/categories")
app.include_router(customers.router, tags=["Admin customers"], prefix="/api/admin/customers")
app.include_router(orders.admin_router, tags=["Admin orders"], prefix="/api/admin/orders")
app.include_router(users.router, tags=["Admin users"], prefix="/api/admin/users")


@app.get("/api/health", tags=["Health"])
def health_check():
    """Liveness plus a database round trip."""
    if not is_configured():
        return {"status": "ok", "database": "not_configured"}
    return {"status": "ok", "database": "ok" if ping() else "unreachable"}
