"""
Run a receiver that assembles uploads under ./App_Data/tmp
"""
from partialuploader import ReceiverConfig, setup_logging
from partialuploader.server import run_server


def main():
    setup_logging()

    config = ReceiverConfig(
        base_path="App_Data",
        final_area_name="tmp",
        max_chunk_size=32 * 1024 * 1024
    )
    # POST chunks to /upload, query sessions at /upload/{session_id}
    run_server(config, host="0.0.0.0", port=8080)


if __name__ == "__main__":
    main()
