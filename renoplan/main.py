import tomllib
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from renoplan.admin.router import router as admin_router
from renoplan.ai.chat.router import router as chat_router
from renoplan.ai.extraction.router import router as extraction_router
from renoplan.ai.gateway.client import close_gateway_client
from renoplan.ai.images.router import router as images_router
from renoplan.auth.router import router as auth_router
from renoplan.bom.router import router as bom_generation_router
from renoplan.config import get_app_settings, get_client_base_url
from renoplan.db.boms.router import router as boms_router
from renoplan.db.conversations.router import router as conversations_router
from renoplan.db.database import close_db, init_db
from renoplan.db.projects.router import router as projects_router
from renoplan.db.vendors.router import router as vendors_router
from renoplan.products.router import router as products_router
from renoplan.storage.router import router as storage_router
from renoplan.utils.logger import logger


def get_version():
    """Get version from pyproject.toml"""
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)
    return data["project"]["version"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    if get_app_settings().auto_create_tables:
        await init_db()
    logger.info("Renoplan API started", version=app.version)
    yield
    await close_gateway_client()
    await close_db()


app = FastAPI(
    title="Renoplan API",
    description="API for the Renoplan renovation planner",
    version=get_version(),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_client_base_url()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api")
app.include_router(chat_router, prefix="/api")
app.include_router(extraction_router, prefix="/api")
app.include_router(images_router, prefix="/api")
app.include_router(storage_router, prefix="/api")
app.include_router(bom_generation_router, prefix="/api")
app.include_router(boms_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(projects_router, prefix="/api")
app.include_router(conversations_router, prefix="/api")
app.include_router(vendors_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {"status": "ok", "message": "Renoplan API is running"}


@app.get("/healthcheck")
async def healthcheck():
    """Health check endpoint."""
    return {"status": "ok", "message": "Renoplan API is running"}
