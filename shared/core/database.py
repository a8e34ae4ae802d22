from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import WAREHOUSE_DATABASE_URL

Base = declarative_base()

POOL_SIZE = 5
MAX_OVERFLOW = 5


def build_engine(url: str):
    if url.startswith("sqlite"):
        # sqlite has no server-side pool; requests run on worker threads
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,    # max temporary extra connections
        pool_timeout=30               # wait time before failing
    )


warehouse_engine = build_engine(WAREHOUSE_DATABASE_URL)
WarehouseSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=warehouse_engine)


# Dependency
def get_warehouse_db():
    db = WarehouseSessionLocal()
    try:
        yield db
    finally:
        db.close()
