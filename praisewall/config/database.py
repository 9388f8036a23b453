"""
Database configuration and connection management for MongoDB
"""
from motor.motor_asyncio import AsyncIOMotorClient
from typing import Optional
import os
from dotenv import load_dotenv

load_dotenv()

class DatabaseConfig:
    """MongoDB database configuration"""

    def __init__(self):
        self.MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.DATABASE_NAME = os.getenv("DATABASE_NAME", "praisewall_db")
        self.client: Optional[AsyncIOMotorClient] = None
        self.database = None

    async def connect_db(self):
        """Connect to MongoDB"""
        try:
            self.client = AsyncIOMotorClient(self.MONGO_URI)
            self.database = self.client[self.DATABASE_NAME]
            await self.client.admin.command('ping')
            print(f"✅ Connected to MongoDB: {self.DATABASE_NAME}")
            await self.ensure_indexes()
        except Exception as e:
            print(f"❌ Error connecting to MongoDB: {e}")
            raise

    async def ensure_indexes(self):
        """Revoked tokens expire with the JWT they revoke"""
        revoked = self.get_collection(Collections.REVOKED_TOKENS)
        await revoked.create_index("expires_at", expireAfterSeconds=0)
        await revoked.create_index("jti")

    async def close_db(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            print("✅ MongoDB connection closed")

    def use_client(self, client, database_name: Optional[str] = None):
        """Attach an already constructed client (tests, scripts)"""
        self.client = client
        self.database = client[database_name or self.DATABASE_NAME]

    def get_collection(self, collection_name: str):
        """Get a specific collection"""
        if self.database is None:
            raise Exception("Database not connected")
        return self.database[collection_name]

# Global database instance
db_config = DatabaseConfig()

# Collection names
class Collections:
    ACCOUNTS = "accounts"
    REVOKED_TOKENS = "revoked_tokens"
    ACCOUNT_SETTINGS = "user_settings"

    # Collection forms
    FORMS = "testimonial_forms"
    FORM_FIELDS = "form_fields"

    # Submissions
    TESTIMONIALS = "testimonials"
