from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

STORAGE_PATH = BASE_DIR / "todos.json"
STORAGE_KEY = "todos@crash"
SECRET_KEY = "dev"
MAX_CONTENT_LENGTH = 1024 * 1024
