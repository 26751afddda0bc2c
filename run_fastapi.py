"""
Start the cloud agent bridge under uvicorn.

    python run_fastapi.py

Equivalent to:
    uvicorn cloud_agent_bridge.fastapi_app:create_fastapi_app --factory --host 0.0.0.0 --port 5001
"""

import os

from dotenv import load_dotenv

# .env.local wins over .env; load_dotenv never overrides a value already set
load_dotenv(".env.local")
load_dotenv()

import uvicorn

if __name__ == "__main__":
    app_env = os.getenv("APP_ENV", "development")
    reload = app_env == "development"
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5001))

    print(f"Cloud agent bridge ({app_env}) listening on {host}:{port}")
    print("Point the Discord interactions URL at /api/discord/interactions")

    uvicorn.run(
        "cloud_agent_bridge.fastapi_app:create_fastapi_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info" if reload else "warning",
    )
