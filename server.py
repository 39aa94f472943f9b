# server.py
import os
import uvicorn
from main import config

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        # Reload re-imports main in a child process; structlog reconfigures there
        reload=config.environment == "development",
        log_level=config.logging.level_value.lower(),
    )
