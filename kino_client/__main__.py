import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "kino_client.main:app",
        host=os.getenv("KINO_HOST", "127.0.0.1"),
        port=int(os.getenv("KINO_PORT", "8090"))
    )
