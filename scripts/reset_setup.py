#!/usr/bin/env python3
"""
CLI script to reset the store setup so the setup wizard runs again.

Usage (soft reset, only clears the setup flag):
    python scripts/reset_setup.py

Usage (full reset, deletes every configuration entry):
    python scripts/reset_setup.py --full
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.database import close_db
from storefront.services.cache_service import close_cache, init_cache
from storefront.services.config_service import ConfigKeys, get_config_service


async def reset_setup(full: bool = False) -> bool:
    """Reset the setup state, returning whether anything was removed."""
    print("\n" + "=" * 50)
    print("Storefront - Reset Setup")
    print("=" * 50 + "\n")

    await init_cache()
    service = get_config_service()

    if full:
        print("Full reset - deleting all configuration entries...")
        deleted = await service.delete_all()
        print(f"  Deleted {deleted} configuration entries")
        removed = deleted > 0
    else:
        print("Soft reset - clearing the setup flag only...")
        removed = await service.delete(ConfigKeys.SETUP_COMPLETE)
        if removed:
            print("  Setup flag removed, settings are preserved")
        else:
            print("  Setup flag was not set (already in fresh state)")

    print("\nRestart the application and open /setup to run setup again.\n")
    return removed


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Reset the storefront setup state")
    parser.add_argument("--full", action="store_true", help="Delete every configuration entry")

    args = parser.parse_args()

    try:
        await reset_setup(full=args.full)
        sys.exit(0)
    except KeyboardInterrupt:
        print("\n\nAborted by user.")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        await close_cache()
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
