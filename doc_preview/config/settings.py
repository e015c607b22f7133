"""
Configuration settings for the doc-preview application.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).resolve().parent.parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))
SESSION_DIR = Path(os.getenv("SESSION_DIR", str(DATA_DIR / "session")))

# Create required directories
DATA_DIR.mkdir(parents=True, exist_ok=True)
SESSION_DIR.mkdir(parents=True, exist_ok=True)

# API Keys
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# Langfuse Configuration
LANGFUSE_PUBLIC_KEY = os.getenv("LANGFUSE_PUBLIC_KEY")
LANGFUSE_SECRET_KEY = os.getenv("LANGFUSE_SECRET_KEY")

# Model Configuration
CHAT_MODEL = os.getenv("CHAT_MODEL", "openai/gpt-4o-mini")
TEMPERATURE = 0.3  # Summaries should stay close to the source text
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "60"))  # seconds
SUMMARY_MAX_CHARS = 5000  # Characters of document content sent to the model

# Retry Configuration
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
RETRY_DELAY = int(os.getenv("RETRY_DELAY", "1"))  # seconds

# Session Configuration
STORAGE_KEY = "doc_preview_session_files"
SESSION_SCHEMA_VERSION = 1
SESSION_QUOTA_BYTES = int(os.getenv("SESSION_QUOTA_BYTES", str(5 * 1024 * 1024)))  # 5MB default

# File Types
ACCEPTED_EXTENSIONS = [".pdf", ".md", ".xml", ".txt", ".pptx"]
TEXT_EXTENSIONS = (".md", ".txt", ".xml")
DEFAULT_MIME_TYPE = "application/octet-stream"

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
