import os
from pathlib import Path
from dotenv import load_dotenv

# .env лежит рядом с пакетом; переменные окружения имеют приоритет
load_dotenv(Path(__file__).with_name(".env"))


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "")
DEBUG = _flag("DEBUG")

JWT_SECRET = os.getenv("JWT_SECRET", "development_secret_key")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 дней

CERTIFICATE_BASE_URL = os.getenv("CERTIFICATE_BASE_URL", "https://certificates.skillproof.com").rstrip("/")
PROOF_PASS_THRESHOLD = float(os.getenv("PROOF_PASS_THRESHOLD", "70"))
