"""
Use the receiver without HTTP, e.g. behind another transport
"""
import asyncio
from partialuploader import ChunkReceiver, ChunkUpload, MemoryStorageGateway


async def main():
    storage = MemoryStorageGateway()
    receiver = ChunkReceiver(storage)

    data = b"hello, chunked world"
    parts = [data[:8], data[8:16], data[16:]]

    for ordinal, payload in enumerate(parts, start=1):
        receipt = await receiver.receive_chunk(ChunkUpload(
            session_id="demo",
            ordinal=ordinal,
            total_chunks=len(parts),
            total_size=len(data),
            file_name="greeting.txt",
            payload=payload,
            is_last=ordinal == len(parts)
        ))
        print(f"Chunk {ordinal}: {receipt.status.value} {receipt.message}")

    print(await storage.read_bytes(receipt.artifact_path))
    print(receiver.session("demo").to_dict())


if __name__ == "__main__":
    asyncio.run(main())
