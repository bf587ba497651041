from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from groupware import __version__
from groupware.core.config import get_settings
from groupware.core.logging import setup_logger
from groupware.api.routers import auth, approvals, approval_templates, health

settings = get_settings()

setup_logger(
    "groupware",
    log_dir=settings.log_dir,
    level=settings.log_level,
    file_logging=settings.log_to_file,
)

app = FastAPI(
    title=settings.app_name,
    description="Groupware approval workflow service",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router, prefix="/api")
app.include_router(approvals.router, prefix="/api")
app.include_router(approval_templates.router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }
