import os

import uvicorn
from dotenv import load_dotenv


def serve() -> None:
    load_dotenv()
    uvicorn.run(
        "infrastructure.http.api:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
    )


if __name__ == "__main__":
    serve()
