"""
Basic usage example for Chunkvault.
"""

import asyncio

from chunkvault import ChunkedStorage, Config, JsonFileStore


def log(message, level):
    print(f"[{level}] {message}")


def handle_error(message):
    print(f"[error] {message}")


async def main():
    config = Config()
    storage = ChunkedStorage(JsonFileStore("cloud_storage.json", config), config)

    # Store wallet data
    print("Storing wallet data...")
    await asyncio.gather(
        storage.store_with_chunking("userShare", "user-share-" * 1000, log, handle_error),
        storage.store_with_chunking("walletId", "wallet-1234", log, handle_error),
    )

    # Read it back
    print("\nRetrieving wallet data...")
    user_share = await storage.retrieve_chunked_data("userShare", log, handle_error)
    wallet_id = await storage.retrieve_chunked_data("walletId", log, handle_error)
    print(f"Wallet {wallet_id}: user share of {len(user_share or '')} characters")

    # Inspect
    report = await storage.inspect("userShare")
    print(f"\nuserShare: {report.state}, {len(report.present_chunks)} chunk(s)")

    # Clear
    print("\nClearing storage...")
    await storage.clear_chunked_storage(log, handle_error)


if __name__ == "__main__":
    asyncio.run(main())
