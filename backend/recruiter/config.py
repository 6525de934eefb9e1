"""
Centralized configuration — all settings loaded from environment variables
with sensible defaults for local development.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# ── Server ──────────────────────────────────────────────────────────────────
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "3000"))

# ── Ollama / LLM ───────────────────────────────────────────────────────────
OLLAMA_HOST: str = os.getenv("OLLAMA_HOST", "https://ollama.com")
OLLAMA_MODEL: str = os.getenv("OLLAMA_MODEL", "gpt-oss:120b")
OLLAMA_API_KEY: str = os.getenv("OLLAMA_API_KEY", "")

LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "2000"))
LLM_TOP_P: float = float(os.getenv("LLM_TOP_P", "0.95"))

# Only rate-limit (429) responses are retried
LLM_RATE_LIMIT_RETRIES: int = int(os.getenv("LLM_RATE_LIMIT_RETRIES", "3"))
LLM_BACKOFF_SECONDS: float = float(os.getenv("LLM_BACKOFF_SECONDS", "1.0"))

# ── CORS ────────────────────────────────────────────────────────────────────
# Comma-separated origins, e.g. "http://localhost:3000,https://app.example.com"
_raw_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
CORS_ORIGINS: list[str] = [o.strip() for o in _raw_origins.split(",") if o.strip()]

# ── File Uploads ────────────────────────────────────────────────────────────
MAX_UPLOAD_FILES: int = int(os.getenv("MAX_UPLOAD_FILES", "50"))
MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)))

# ── Batch ranking ───────────────────────────────────────────────────────────
RANK_CONCURRENCY: int = max(1, int(os.getenv("RANK_CONCURRENCY", "1")))
MIN_CV_CHARS: int = int(os.getenv("MIN_CV_CHARS", "50"))
CV_EXCERPT_CHARS: int = int(os.getenv("CV_EXCERPT_CHARS", "500"))

# ── Logging ─────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
