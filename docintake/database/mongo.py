import logging
from motor.motor_asyncio import AsyncIOMotorClient

from docintake import config

logger = logging.getLogger(__name__)

client: AsyncIOMotorClient = None
db = None

async def connect_to_mongo():
    global client, db
    client = AsyncIOMotorClient(config.MONGO_URI)
    db = client[config.MONGO_DB_NAME]
    logger.info("Connected to MongoDB database %s", config.MONGO_DB_NAME)

async def close_mongo_connection():
    global client, db
    if client:
        client.close()
        client = None
        db = None
        logger.info("MongoDB connection closed")
