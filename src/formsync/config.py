import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SUBMIT_URL = "http://localhost:5000/api/forms/submit"
DEFAULT_SUBMIT_TIMEOUT = 30.0
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    SUBMIT_URL = os.getenv("FORMSYNC_SUBMIT_URL", DEFAULT_SUBMIT_URL)
    SUBMIT_TIMEOUT = os.getenv("FORMSYNC_SUBMIT_TIMEOUT", str(DEFAULT_SUBMIT_TIMEOUT))
    LOG_LEVEL = os.getenv("FORMSYNC_LOG_LEVEL", "WARNING").upper()

    @classmethod
    def submit_timeout(cls) -> float:
        return float(cls.SUBMIT_TIMEOUT)

    @classmethod
    def validate(cls):
        invalid = []
        if not cls.SUBMIT_URL or not cls.SUBMIT_URL.startswith(("http://", "https://")):
            invalid.append("FORMSYNC_SUBMIT_URL")
        try:
            if cls.submit_timeout() <= 0:
                invalid.append("FORMSYNC_SUBMIT_TIMEOUT")
        except ValueError:
            invalid.append("FORMSYNC_SUBMIT_TIMEOUT")
        if cls.LOG_LEVEL not in LOG_LEVELS:
            invalid.append("FORMSYNC_LOG_LEVEL")

        if invalid:
            raise RuntimeError(
                "Invalid environment variables: " + ", ".join(invalid)
            )
