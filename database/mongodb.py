from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# ============================================================
# INDEX DEFINITIONS
# ============================================================

FLEET_INDEXES = {
    "aircrafts": [
        {
            "keys": [("registration", 1)],
            "unique": True,
            "name": "registration_unique"
        },
    ],
    "components": [
        {
            "keys": [("aircraft_id", 1)],
            "name": "aircraft_id_idx"
        },
        {
            "keys": [("serial_number", 1)],
            "name": "serial_number_idx"
        },
    ],
}

class Database:
    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self, mongo_url: str, db_name: str):
        """Connect to MongoDB and make sure fleet indexes exist"""
        try:
            self.client = AsyncIOMotorClient(mongo_url)
            self.db = self.client[db_name]
            # Verify connection
            await self.client.admin.command('ping')
            logger.info(f"Connected to MongoDB database: {db_name}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise
        await self.ensure_indexes()

    async def ensure_indexes(self):
        """Create the fleet collection indexes (idempotent)"""
        for collection, indexes in FLEET_INDEXES.items():
            for index in indexes:
                await self.db[collection].create_index(
                    index["keys"],
                    name=index["name"],
                    unique=index.get("unique", False)
                )
        logger.info("Fleet indexes verified")

    async def disconnect(self):
        """Disconnect from MongoDB"""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    def get_db(self) -> AsyncIOMotorDatabase:
        """Get database instance"""
        if self.db is None:
            raise RuntimeError("Database not connected")
        return self.db

db = Database()

async def get_database() -> AsyncIOMotorDatabase:
    return db.get_db()
