from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
import logging

from dankpos.core.config import settings
from dankpos.core.exceptions import AppError, ConfigurationError
from dankpos.database.resolver import close_host_client, get_host_client

# Import middleware
from dankpos.common.middleware import CredentialContextMiddleware, SecurityHeadersMiddleware

# Import routers
from dankpos.modules.auth.router import auth_router
from dankpos.modules.sessions.router import sessions_router
from dankpos.modules.orders.router import orders_router
from dankpos.modules.invoices.router import invoices_router
from dankpos.modules.categories.router import categories_router
from dankpos.modules.members.router import members_router
from dankpos.modules.admin_users.router import admin_users_router
from dankpos.modules.strains.router import strains_router
from dankpos.modules.transactions.router import transactions_router
from dankpos.modules.email.router import router as email_router

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Dank PoS API",
    description="Multi-tenant point-of-sale and kiosk API. Each shop is served from its own hosted database.",
    version="0.3.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(CredentialContextMiddleware)

# Credential cookies need credentialed CORS; wildcard origins are for development only
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----- error handling -----

@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.critical(f"Configuration error on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": "Server configuration error."})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    content = {"error": "Invalid request payload."}
    if settings.ENVIRONMENT != "production":
        content["details"] = jsonable_errors(exc)
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "An unexpected error occurred"})


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


# ----- routers -----

app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
app.include_router(sessions_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(invoices_router, prefix="/api")
app.include_router(categories_router, prefix="/api")
app.include_router(members_router, prefix="/api")
app.include_router(admin_users_router, prefix="/api")
app.include_router(strains_router, prefix="/api")
app.include_router(transactions_router, prefix="/api")
app.include_router(email_router, prefix="/api")


@app.get("/")
async def read_root():
    return {
        "message": "Dank PoS API is running",
        "version": "0.3.0",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


@app.on_event("startup")
async def startup_event():
    logger.info("Dank PoS API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    # Refuse to serve traffic without a host database
    host_client = get_host_client()
    logger.info(f"Host database: {host_client.endpoint_url}")
    if settings.STRICT_TENANT_ROUTING:
        logger.info("Strict tenant routing enabled: shop routes require credential cookies")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Dank PoS API shutting down...")
    await close_host_client()
