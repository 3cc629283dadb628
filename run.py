import os

import uvicorn

if __name__ == "__main__":
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", 8000))

    # Disable reload in production
    reload = os.getenv("ENV") == "development"

    uvicorn.run(
        "portfolio_engine.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
        workers=1,
        lifespan="auto",
    )
