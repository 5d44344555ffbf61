import os
from typing import Optional

# Database connection URL (async)
# Example: "postgresql+asyncpg://user@localhost/places_db"
SQLALCHEMY_DATABASE_URL: str = os.environ["DATABASE_URL"]

# LocationIQ access token used for geocoding addresses
LOCATIONIQ_TOKEN: str = os.environ.get("LOCATIONIQ_TOKEN", "")

# LocationIQ search endpoint
GEOCODING_URL: str = os.environ.get("GEOCODING_URL", "https://us1.locationiq.com/v1/search.php")

# Upper bound for a single geocoding request
GEOCODING_TIMEOUT_SECONDS: float = float(os.environ.get("GEOCODING_TIMEOUT_SECONDS", "5"))

# Upper bound for the transaction that links a place to its creator
TRANSACTION_TIMEOUT_SECONDS: float = float(os.environ.get("TRANSACTION_TIMEOUT_SECONDS", "10"))

# Directory where uploaded images are written
UPLOAD_DIR: str = os.environ.get("UPLOAD_DIR", "uploads/images")

# Max accepted image size in bytes
MAX_IMAGE_BYTES: int = int(os.environ.get("MAX_IMAGE_BYTES", "500000"))

# How long a session token stays valid after login/signup
SESSION_TTL_HOURS: int = int(os.environ.get("SESSION_TTL_HOURS", "24"))

# Allow requests from this origin
ALLOW_ORIGIN: Optional[str] = os.environ.get("ALLOW_ORIGIN")

# If true, enable docs and openapi.json endpoints
ENABLE_DOCS: bool = os.environ.get("ENABLE_DOCS") == "1"
