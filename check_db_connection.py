import sys
from core.config import settings
from pymongo import MongoClient
from pymongo.errors import PyMongoError

def check_connection():
    print("--- Checking MongoDB Connection ---")
    print(f"Connection String (masked): {settings.final_mongo_uri.split('@')[-1] if '@' in settings.final_mongo_uri else '...local...'}")
    print(f"Database: {settings.db_name}")

    try:
        client = MongoClient(settings.final_mongo_uri, serverSelectionTimeoutMS=5000)
        # ping is cheap and does not require auth.
        client.admin.command('ping')
        collections = client[settings.db_name].list_collection_names()
        print(f"✅ Connection successful! Collections: {', '.join(sorted(collections)) or 'none yet'}")
        return True
    except PyMongoError as e:
        print("❌ Connection failed!")
        print(f"Error: {e}")
        return False

if __name__ == "__main__":
    if check_connection():
        sys.exit(0)
    else:
        sys.exit(1)
