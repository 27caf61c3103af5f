import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from .auth import SupabaseAuth
from .config import get_settings
from .dashboard import DashboardRegistry
from .db import close_db, configure_engine, init_db
from .errors import LoginRequired
from .logging_setup import setup_logging
from .routes import pages, tasks
from .table import SqlTaskTable

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    session_factory = configure_engine(settings.database_url)
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.warning("Database connection failed: %s", e)
        logger.warning("Application will start but task operations may fail")

    app.state.registry = DashboardRegistry(SqlTaskTable(session_factory))
    app.state.auth = SupabaseAuth(settings.supabase_url, settings.supabase_anon_key)
    yield
    # Shutdown
    await app.state.auth.aclose()
    await close_db()


# Create FastAPI app
app = FastAPI(
    title="Task Dashboard",
    description="Personal task tracking on top of Supabase auth and Postgres",
    version="1.0.0",
    lifespan=lifespan
)

logger.info("CORS origins: %s", settings.allowed_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse("/login", status_code=303)


app.include_router(pages.router)
app.include_router(tasks.router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "taskdash",
        "version": app.version,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "taskdash.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
