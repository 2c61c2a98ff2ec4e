"""Database models and connection setup."""

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from typing import Optional
from config.settings import settings
from utils.exceptions import PersistenceError
from utils.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_DB_NAME = "workouts"


class Database:
    """Database connection manager."""

    client: Optional[AsyncIOMotorClient] = None


db = Database()


def get_database_name() -> str:
    """Resolve the database name from settings or the connection URL path."""
    if settings.mongodb_db_name:
        return settings.mongodb_db_name
    path = settings.mongodb_url.split("://", 1)[-1]
    if "/" not in path:
        return DEFAULT_DB_NAME
    name = path.split("/", 1)[1].split("?", 1)[0]
    return name or DEFAULT_DB_NAME


async def connect_to_mongo():
    """Create database connection."""
    db.client = AsyncIOMotorClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=10000,
        socketTimeoutMS=45000,
        connectTimeoutMS=10000,
    )
    logger.info(f"Connected to MongoDB database '{get_database_name()}'")


async def close_mongo_connection():
    """Close database connection."""
    if db.client:
        db.client.close()
        db.client = None
        logger.info("Disconnected from MongoDB")


async def init_mongo():
    """Initialize MongoDB connection and all collections with indexes."""
    await connect_to_mongo()

    database = get_database()

    # Users collection
    await database.users.create_index([("email", ASCENDING)], unique=True)
    await database.users.create_index([("username", ASCENDING)], unique=True)

    # Workout sessions: one per user, exercises addressed by embedded id
    await database.workouts.create_index([("userId", ASCENDING)])
    await database.workouts.create_index([("userId", ASCENDING), ("exercises._id", ASCENDING)])

    # Meals collection
    await database.meals.create_index(
        [("userId", ASCENDING), ("date", DESCENDING), ("mealType", ASCENDING)],
        unique=True,
    )

    # Body measurement details
    await database.details.create_index([("userId", ASCENDING)], unique=True)

    logger.info("MongoDB initialized: All collections created with indexes")


async def ping_database() -> bool:
    """Return True when the server answers a ping."""
    if not db.client:
        return False
    try:
        await db.client.admin.command("ping")
        return True
    except Exception as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


def get_database():
    """Get database instance."""
    if db.client is None:
        raise PersistenceError("Database is not connected")
    return db.client[get_database_name()]


# Helper functions to get collections
def get_users_collection():
    """Get users collection."""
    return get_database().users


def get_workouts_collection():
    """Get workout sessions collection."""
    return get_database().workouts


def get_meals_collection():
    """Get meals collection."""
    return get_database().meals


def get_details_collection():
    """Get body measurement details collection."""
    return get_database().details
