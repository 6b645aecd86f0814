import os
from urllib.parse import quote_plus
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional
from dotenv import load_dotenv
from fastapi import Request
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

# Load environment variables
load_dotenv()


def build_mongodb_url() -> str:
    """
    Resolve the MongoDB connection string.

    MONGODB_URL wins when set. Otherwise an Atlas SRV url is built from
    DB_USER / DB_PASS / DB_HOST, and a local server is the last resort.
    """
    mongodb_url = os.getenv("MONGODB_URL")
    if mongodb_url:
        return mongodb_url

    db_user = os.getenv("DB_USER")
    db_pass = os.getenv("DB_PASS")
    if db_user and db_pass:
        db_host = os.getenv("DB_HOST", "cluster0.mongodb.net")
        return (
            f"mongodb+srv://{quote_plus(db_user)}:{quote_plus(db_pass)}@{db_host}/"
            "?retryWrites=true&w=majority"
        )

    return "mongodb://localhost:27017"


class Database:
    """Owns the single motor client shared by every request for the process lifetime"""

    def __init__(self, mongodb_url: Optional[str] = None, database_name: Optional[str] = None):
        self.mongodb_url = mongodb_url or build_mongodb_url()
        self.database_name = database_name or os.getenv("DATABASE_NAME", "contestCornerDB")
        self.client: Optional[AsyncIOMotorClient] = None

    async def connect_db(self):
        """Connect to MongoDB and confirm the deployment answers"""
        self.client = AsyncIOMotorClient(self.mongodb_url)

        try:
            await self.client.admin.command("ping")
            print("[OK] Pinged MongoDB deployment, connection established")
        except PyMongoError as e:
            # Requests will surface their own errors; startup keeps going
            print(f"[ERROR] MongoDB ping failed: {e}")
            return

        await self.create_indexes()

    async def create_indexes(self):
        """Create database indexes"""
        db = self.get_db()

        try:
            await db.users.create_index([("email", ASCENDING)], unique=True)
            print("[OK] Created unique index on users.email")
        except PyMongoError as e:
            print(f"[WARN] Index on users.email may already exist: {e}")

        try:
            await db.submissions.create_index([("contest_id", ASCENDING)])
            await db.submissions.create_index([("participant_email", ASCENDING)])
            print("[OK] Created indexes on submissions")
        except PyMongoError as e:
            print(f"[WARN] Indexes on submissions may already exist: {e}")

        try:
            await db.payments.create_index([("contest_id", ASCENDING)])
            await db.payments.create_index([("email", ASCENDING)])
            await db.payments.create_index([("transaction_id", ASCENDING)], unique=True, sparse=True)
            print("[OK] Created indexes on payments")
        except PyMongoError as e:
            print(f"[WARN] Indexes on payments may already exist: {e}")

    async def close_db(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            print("[OK] Disconnected from MongoDB")

    def get_db(self) -> AsyncIOMotorDatabase:
        """Get database instance"""
        return self.client[self.database_name]


async def get_database(request: Request) -> AsyncIOMotorDatabase:
    """Dependency to get the database bound to the running application"""
    return request.app.state.database.get_db()
