import os
from dotenv import load_dotenv

load_dotenv()

# Any OpenAI-compatible chat endpoint works; the default is Gemini's
AI_API_KEY = (
    os.environ.get("POWERTRAIN_TCO_API_KEY")
    or os.environ.get("GEMINI_API_KEY")
    or os.environ.get("OPENAI_API_KEY", "")
)
AI_BASE_URL = os.environ.get(
    "POWERTRAIN_TCO_BASE_URL",
    "https://generativelanguage.googleapis.com/v1beta/openai/",
)
AI_MODEL = os.environ.get("POWERTRAIN_TCO_MODEL", "gemini-2.5-flash")
AI_TIMEOUT = float(os.environ.get("POWERTRAIN_TCO_TIMEOUT", "60"))

LOG_LEVEL = os.environ.get("POWERTRAIN_TCO_LOG_LEVEL", "INFO")
