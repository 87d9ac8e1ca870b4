#!/usr/bin/env python3
"""
Development script for starting the API
"""
import os

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def print_instructions(host: str, port: int):
    """Print setup instructions"""
    base_url = f"http://{host}:{port}"
    print("\n" + "=" * 60)
    print("🎯 DEVELOPMENT SETUP")
    print("=" * 60)
    print(f"📡 API URL: {base_url}/api/v1")
    print(f"📚 Docs: {base_url}/docs")
    print(f"🗄️  Profile store: {os.getenv('STORE_BACKEND', 'mongo')}")
    print("\n📋 NEXT STEPS:")
    print("1. Seed test users: python scripts/seed_users.py")
    print(f"2. Open a swipe deck: {base_url}/api/v1/swipe-pools/sarahjohnson/johnsmith")
    print("=" * 60)


def main():
    """Main function"""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    print("🔧 Starting development environment...")
    print_instructions("localhost", port)

    print("\n🚀 Starting application...")
    print("   Press Ctrl+C to stop")

    try:
        uvicorn.run("swipematch.main:app", host=host, port=port, reload=True)
    except KeyboardInterrupt:
        print("\n👋 Stopping application...")


if __name__ == "__main__":
    main()
