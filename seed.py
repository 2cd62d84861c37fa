from sqlalchemy.orm import Session
from database import SessionLocal, engine, Base
import models  # noqa: F401  registers every table on Base.metadata
from models.user import User, UserRole, UserStatus
from models.job_masters import Particular, Colour, BagType, CuttingType, PrintSize
from config.settings import settings
from auth import get_password_hash
from utils.finished_goods import reserve_unbundled_id
from decimal import Decimal
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Row 1 of these tables is what job cards store for an inactive stage
NOT_APPLICABLE = "N/A"

DEFAULT_COLOURS = ["Red", "Blue", "Green", "Black", "Yellow", "White"]
DEFAULT_PRINT_SIZES = [NOT_APPLICABLE, "12 inch", "14 inch", "16 inch", "18 inch"]
DEFAULT_CUTTING_TYPES = [NOT_APPLICABLE, "Square Bottom", "V Bottom", "Flat"]
DEFAULT_BAG_TYPES = [
    (NOT_APPLICABLE, Decimal("0.00")),
    ("Grocery Bag Small", Decimal("1.20")),
    ("Grocery Bag Large", Decimal("2.10")),
    ("Food Bag", Decimal("0.80")),
    ("Medicine Bag", Decimal("0.60")),
]
DEFAULT_PARTICULARS = ["Kraft Paper", "White Paper", "Grease Proof Paper"]


def seed_lookup(db: Session, model, column: str, values, label: str):
    """Insert lookup rows on an empty table, in order."""
    if db.query(model).first():
        logger.info(f"{label} already exist")
        return
    for value in values:
        if isinstance(value, tuple):
            name, price = value
            db.add(model(**{column: name, "bag_price": price}))
        else:
            db.add(model(**{column: value}))
        db.flush()
    logger.info(f"Seeded {len(values)} {label}")


def seed_job_masters():
    """Seed colours, print sizes, cutting types, bag types and roll types."""
    db = SessionLocal()
    try:
        seed_lookup(db, Colour, "colour_name", DEFAULT_COLOURS, "colours")
        seed_lookup(db, PrintSize, "print_size", DEFAULT_PRINT_SIZES, "print sizes")
        seed_lookup(db, CuttingType, "cutting_type", DEFAULT_CUTTING_TYPES, "cutting types")
        seed_lookup(db, BagType, "bag_type", DEFAULT_BAG_TYPES, "bag types")
        seed_lookup(db, Particular, "particular_name", DEFAULT_PARTICULARS, "roll types")
        reserve_unbundled_id(db)
        db.commit()
    except Exception as e:
        logger.error(f"Error seeding job masters: {e}")
        db.rollback()
    finally:
        db.close()


def create_default_admin():
    """Create the default admin user if no superadmin exists."""
    db = SessionLocal()
    try:
        existing_superadmin = db.query(User).filter(
            User.role == UserRole.SUPERADMIN
        ).first()

        if existing_superadmin:
            logger.info("Superadmin already exists")
            return existing_superadmin

        if not settings.DEFAULT_ADMIN_PASSWORD:
            logger.warning("DEFAULT_ADMIN_PASSWORD is empty, no admin user created")
            return None

        admin = User(
            username=settings.DEFAULT_ADMIN_USERNAME,
            password=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
            role=UserRole.SUPERADMIN,
            status=UserStatus.ACTIVE
        )

        db.add(admin)
        db.commit()
        db.refresh(admin)

        logger.info(f"Default admin '{admin.username}' created, change its password")
        return admin

    except Exception as e:
        logger.error(f"Error creating default admin: {e}")
        db.rollback()
        return None
    finally:
        db.close()


def init_database():
    """Initialize database with tables and seed data."""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")

        create_default_admin()
        seed_job_masters()

    except Exception as e:
        logger.error(f"Error initializing database: {e}")


if __name__ == "__main__":
    init_database()
