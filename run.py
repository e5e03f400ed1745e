#!/usr/bin/env python3
"""
Minisites - Quick Start Script

Run this script to start the minisites server.
"""
import sys
import os

# Add the project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

if __name__ == "__main__":
    import uvicorn
    from minisites.config import get_settings

    settings = get_settings()

    print("=" * 50)
    print("Minisites")
    print("=" * 50)
    print(f"Server starting at http://{settings.host}:{settings.port}")
    print(f"Store: {settings.store_backend}")
    print(f"Root domains: {', '.join(settings.root_domains)}")
    print("=" * 50)

    uvicorn.run(
        "minisites.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
