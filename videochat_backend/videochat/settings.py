import os
from dotenv import load_dotenv
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Load .env file if it exists (for local development)
env_path = os.path.join(os.path.dirname(__file__), "..", ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)
    logger.info("Loaded .env file for local development")
else:
    logger.info("No .env file found, using environment variables")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")

# Any OpenAI-compatible chat completions endpoint works; Gemini's is the default.
AI_BASE_URL = os.getenv("AI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
AI_MODEL = os.getenv("AI_MODEL", "gemini-2.5-pro")
AI_FAST_MODEL = os.getenv("AI_FAST_MODEL", "gemini-2.5-flash")
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.4"))
AI_REQUEST_TIMEOUT_S = float(os.getenv("AI_REQUEST_TIMEOUT_S", "120"))

# No auth yet: every project belongs to this user.
DEFAULT_USER_ID = os.getenv("DEFAULT_USER_ID", "default")

# Where `videochat chat` finds the server
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000").rstrip("/")
CHAT_PACING_DELAY_S = float(os.getenv("CHAT_PACING_DELAY_S", "1.0"))

# Comma-separated list of allowed origins for CORS (e.g., "https://app.example.com,https://www.example.com").
_allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "").strip()
if _allowed_origins_env:
    ALLOWED_ORIGINS = [o.strip() for o in _allowed_origins_env.split(",") if o.strip()]
else:
    ALLOWED_ORIGINS = ["*"]

def has_all_keys() -> bool:
    keys_present = bool(os.getenv("GEMINI_API_KEY", GEMINI_API_KEY))
    if not keys_present:
        logger.warning("Missing API keys: GEMINI_API_KEY")
    return keys_present
