from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from . import __version__
from .config import settings
from .database import engine, Base
from .routers import admin, ads, auth, billing, branding, contact, estimates, materials, projects

logger = logging.getLogger("construlab")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)


def _run_migrations():
    """Run pending Alembic migrations on startup.

    Handles databases that were created by Base.metadata.create_all() before
    the first migration ran: if alembic_version is missing but the users
    table exists, the initial revision is stamped as applied first.
    """
    try:
        from alembic.config import Config
        from alembic import command
        from sqlalchemy import inspect

        alembic_ini = os.path.join(os.path.dirname(__file__), "..", "alembic.ini")
        if not os.path.exists(alembic_ini):
            logger.info("alembic.ini not found, skipping migrations")
            return

        alembic_cfg = Config(alembic_ini)
        alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
        # env.py skips fileConfig so alembic.ini doesn't reset the app's log levels
        alembic_cfg.attributes["configure_logger"] = False

        insp = inspect(engine)
        has_alembic = "alembic_version" in insp.get_table_names()
        has_users = "users" in insp.get_table_names()

        if not has_alembic and has_users:
            logger.info("Stamping initial migration 3f1c2a9d7b10 (tables already exist)")
            command.stamp(alembic_cfg, "3f1c2a9d7b10")

        logger.info("Running pending Alembic migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")

    except Exception as e:
        # Never let migration errors prevent app startup
        logger.warning(f"Alembic migration warning: {e}")


app = FastAPI(
    title="Construlab Pro",
    description="Construction materials estimator — concrete, aggregates and reinforcing steel",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(auth.router, prefix="/api")
app.include_router(branding.router, prefix="/api")
app.include_router(estimates.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
app.include_router(materials.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
app.include_router(billing.router, prefix="/api")
app.include_router(contact.router, prefix="/api")
app.include_router(ads.router, prefix="/api")

# Serve uploaded logos (local fallback when R2 not configured)
uploads_path = os.path.join(os.getcwd(), "uploads")
os.makedirs(uploads_path, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=uploads_path), name="uploads")


@app.get("/health")
def health():
    return {"status": "ok", "app": "construlab", "version": __version__}


@app.on_event("startup")
def auto_migrate():
    """Run pending Alembic migrations on startup."""
    _run_migrations()


@app.on_event("startup")
def auto_seed():
    """Auto-seed the default material preset on first run."""
    from .database import SessionLocal
    from .routers.materials import seed_default_presets
    db = SessionLocal()
    try:
        added = seed_default_presets(db)
        if added:
            logger.info("Seeded %d material preset(s)", added)
    finally:
        db.close()
