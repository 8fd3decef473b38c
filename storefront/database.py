# storefront/database.py
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from storefront.core.config import get_settings


# ---------------------------------------------------------
# Engine construction
#
# - pool_pre_ping=True: validate connections before using them
# - SQLite needs check_same_thread=False because FastAPI runs sync
#   endpoints in a threadpool.
# ---------------------------------------------------------


def build_engine(db_url: str, echo: bool = False) -> Engine:
    """Create an engine for `db_url`."""
    connect_args = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        db_url,
        echo=echo,  # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        connect_args=connect_args,
    )


@lru_cache
def get_engine() -> Engine:
    """
    Engine for the configured DATABASE_URL.

    Built lazily on first use so that importing the package does not
    open connections.
    """
    settings = get_settings()
    return build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)


def create_db_and_tables(engine: Engine | None = None) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    # Import models so SQLModel metadata is populated before create_all()
    from storefront.models import cart as _cart_models  # noqa: F401
    from storefront.models import product as _product_models  # noqa: F401
    from storefront.models import user as _user_models  # noqa: F401

    SQLModel.metadata.create_all(engine or get_engine())


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(get_engine()) as session:
        yield session
