"""Configuration loader for the registration intake service"""

import os
from pathlib import Path

from dotenv import load_dotenv

server_dir = Path(__file__).parent.parent.parent
env_path = server_dir / ".env"

# Load .env file if it exists. For local development only.
if env_path.exists():
    load_dotenv(env_path)

# Configuration dictionary - set once at initialization
config = {
    "host": os.getenv("HOST", "0.0.0.0"),
    "port": int(os.getenv("PORT", "3000")),
    "data_dir": Path(os.getenv("DATA_DIR", str(server_dir / "data"))),
    # Seconds between background export refreshes
    "export_interval_seconds": float(os.getenv("EXPORT_INTERVAL_SECONDS", "60")),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "cors_origins": [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ],
    "environment": os.getenv("ENVIRONMENT", "development"),
}
