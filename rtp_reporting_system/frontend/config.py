import os

from dotenv import load_dotenv

load_dotenv()


def get_api_base_url() -> str:
    """
    Base URL of the RTP API, configurable via env var RTP_API_BASE_URL.
    """
    return os.getenv("RTP_API_BASE_URL", "http://localhost:5001/api/rtp")


def get_use_mock_data() -> bool:
    """Mock data is on unless RTP_USE_MOCK_DATA is "false"."""
    return os.getenv("RTP_USE_MOCK_DATA", "true").strip().lower() != "false"
