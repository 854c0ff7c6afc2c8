from config import Settings, settings
from database import create_db_engine
from repositories.sql import SqlFleetStore
from services.seed import seed_demo_data, ensure_admin_user
import logging

logger = logging.getLogger(__name__)

def init_database(config: Settings = settings) -> SqlFleetStore:
    """Create tables, seed the demo fleet and the admin account in DATABASE_URL"""
    if not config.database_url:
        raise SystemExit("DATABASE_URL is not set - nothing to initialize")

    store = SqlFleetStore(create_db_engine(config.database_url))
    store.create_schema()
    if config.seed_demo_data:
        seed_demo_data(store, upload_dir=config.upload_dir)
    ensure_admin_user(store, config)
    logger.info("Database initialized")
    return store

if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    init_database()
