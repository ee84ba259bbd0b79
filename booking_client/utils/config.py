import os
from dotenv import load_dotenv

load_dotenv()

class Settings():
    # Backend
    API_BASE_URL: str = os.getenv("API_BASE_URL", "https://my-backend-api-movie.onrender.com/api")
    API_TIMEOUT_SECONDS: float = float(os.getenv("API_TIMEOUT_SECONDS", "10"))
    ACCEPT_LANGUAGE: str = os.getenv("ACCEPT_LANGUAGE", "vi")

    # Reservation rules
    MAX_SELECTED_SEATS: int = int(os.getenv("MAX_SELECTED_SEATS", "8"))
    HOLD_SECONDS: int = int(os.getenv("HOLD_SECONDS", "300"))  # 5 minutes on the payment review step

    # Persisted client state
    STORAGE_PATH: str = os.getenv("STORAGE_PATH", os.path.join(os.path.expanduser("~"), ".booking_client", "storage.json"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"

settings = Settings()
