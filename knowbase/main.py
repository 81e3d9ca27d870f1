import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from knowbase.ai.chat.router import router as chat_router
from knowbase.auth.router import router as account_router
from knowbase.config import Environment, get_app_settings, get_client_base_url
from knowbase.db.contacts.router import router as contacts_router
from knowbase.db.external_links.router import router as external_links_router
from knowbase.db.manuals.router import router as manuals_router
from knowbase.db.news.router import router as news_router
from knowbase.db.reference.router import brands_router, depts_router, groups_router
from knowbase.db.users.router import router as users_router
from knowbase.errors import register_exception_handlers
from knowbase.integrations.drive.router import router as drive_router


def get_version():
    """Get version from pyproject.toml, falling back to installed metadata."""
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        return data["project"]["version"]
    try:
        return version("knowbase")
    except PackageNotFoundError:
        return "0.0.0"


app = FastAPI(
    title="KnowBase API",
    description="API for the KnowBase knowledge portal",
    version=get_version(),
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_client_base_url()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(account_router, prefix="/api")
app.include_router(chat_router, prefix="/api")
app.include_router(manuals_router, prefix="/api")
app.include_router(news_router, prefix="/api")
app.include_router(contacts_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(brands_router, prefix="/api")
app.include_router(depts_router, prefix="/api")
app.include_router(groups_router, prefix="/api")
app.include_router(external_links_router, prefix="/api")
app.include_router(drive_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {"status": "ok", "message": "KnowBase API is running"}


@app.get("/healthcheck")
async def healthcheck():
    """Health check endpoint."""
    return {"status": "ok", "message": "KnowBase API is running"}


def run() -> None:
    """Serve the API with uvicorn; reloads on code changes in development."""
    settings = get_app_settings()
    uvicorn.run(
        "knowbase.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == Environment.DEVELOPMENT,
    )


if __name__ == "__main__":
    run()
