import logging

from swipematch.db.mongodb import mongodb

logger = logging.getLogger(__name__)


async def init_database():
    """Initialize database with collections and indexes"""
    try:
        users = mongodb.get_users_collection()

        # Lookup by phone number during login and friend search
        await users.create_index("phone_number")

        # Candidate loading by capability and orientation inputs
        await users.create_index("user_type")
        await users.create_index([("user_type", 1), ("gender", 1)])

        logger.info("Database indexes created successfully")

    except Exception as e:
        logger.error("Error initializing database: %s", e)
        raise
