import os

basedir = os.path.abspath(os.path.dirname(__file__))


def env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


HOST: str = os.environ.get("HOST", "0.0.0.0")
PORT: int = int(os.environ.get("PORT", "3001"))
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

# memory or database
STORAGE_BACKEND: str = os.environ.get("STORAGE_BACKEND", "memory").strip().lower()
DATABASE_URL: str = os.environ.get(
    "DATABASE_URL", f"sqlite:///{os.path.join(basedir, 'db', 'voltai.db')}"
)
SEED_SAMPLE_DATA: bool = env_flag("SEED_SAMPLE_DATA", "true")

VERSION = "1.0.0"
