"""
Send a file to a receiver
"""
import asyncio
from partialuploader import ChunkSender, SenderConfig, setup_logging


async def main():
    setup_logging()

    async with ChunkSender() as sender:

        # Simple send with the default 24 MiB chunks
        result = await sender.send("http://127.0.0.1:8080/upload", "video.mp4")
        print(f"Session: {result.id} -> {result.message}")

        # Smaller chunks and an auth header on every request
        result = await sender.send(
            "http://127.0.0.1:8080/upload",
            "report.pdf",
            headers={"Authorization": "Bearer <token>"},
            chunk_size=1024 * 1024
        )
        if not result.success:
            print(f"Failed ({result.error_kind.value}): {result.message}")

    # Progress callback and custom configuration
    def on_progress(progress):
        print(f"Progress: {progress.percentage:.1f}% ({progress.sent_chunks}/{progress.total_chunks})")

    config = SenderConfig(chunk_size=4 * 1024 * 1024)
    async with ChunkSender(config, progress_callback=on_progress) as sender:
        result = await sender.send("http://127.0.0.1:8080/upload", "backup.tar")
        # Raise instead of inspecting the result
        result.raise_for_status()


if __name__ == "__main__":
    asyncio.run(main())
