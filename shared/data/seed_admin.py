import logging

from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import Base, WarehouseSessionLocal, warehouse_engine
from shared.models.users import Users
from shared.utils.enums import UserRole, UserStatus

logger = logging.getLogger(__name__)


def ensure_admin(db: Session, username: str, password: str, name: str = "Administrator") -> Users:
    """Create the first admin unless an active one already exists."""
    existing_admin = (
        db.query(Users)
        .filter(
            Users.role == UserRole.ADMIN.value,
            Users.is_deleted == False
        )
        .first()
    )
    if existing_admin:
        logger.info("Admin already exists: %s", existing_admin.username)
        return existing_admin

    admin = Users(
        username=username,
        name=name,
        role=UserRole.ADMIN.value,
        status=UserStatus.active.value,
    )
    admin.set_password(password)
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Admin %s created", admin.username)
    return admin


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    Base.metadata.create_all(bind=warehouse_engine)

    db = WarehouseSessionLocal()
    try:
        ensure_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD, settings.ADMIN_NAME)
    except Exception:
        db.rollback()
        logger.exception("Failed to create admin")
        raise
    finally:
        db.close()
