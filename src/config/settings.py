"""
Configuration settings for the User Directory Backend
"""

import os
import logging

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD or QA
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DATABASE_URL = os.getenv("DATABASE_URL")
PORT = int(os.getenv("PORT", 3001))

# Connection pool tuning
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", 60))

# Pagination defaults for GET /api/users
DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 5
MAX_PAGE_LIMIT = 100

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

logger.info(f"Environment: {ENV}")

# Validate required environment variables
if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is required")

# CORS settings
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()]
