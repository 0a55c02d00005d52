import os
from dotenv import load_dotenv

load_dotenv()

# ============== mongo ===============
MONGO_URI = os.getenv("MONGO_URI") or "mongodb://localhost:27017"
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME") or "docintake"

# ============== uploads ===============
UPLOAD_DIR = os.getenv("UPLOAD_DIR") or "uploads"
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE") or 100 * 1024 * 1024)

# ============== AI providers ===============
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GEN_AI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL") or "models/gemini-1.5-flash"
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL") or "gpt-4o-mini"

# Local development runs without an identity provider
DEFAULT_USER_ID = os.getenv("DEFAULT_USER_ID") or "mock-user-id-123"

# ============== logging ===============
LOG_LEVEL = os.getenv("LOG_LEVEL") or "INFO"
LOG_DIR = os.getenv("LOG_DIR") or "logs"

# ============== pipeline ===============
PDF_PARSE_TIMEOUT = float(os.getenv("PDF_PARSE_TIMEOUT") or 30)
NLP_TIMEOUT = float(os.getenv("NLP_TIMEOUT") or 10)
AI_ENHANCE_TIMEOUT = float(os.getenv("AI_ENHANCE_TIMEOUT") or 45)
MAX_TEXT_LENGTH = 50000
MAX_AI_TEXT_LENGTH = 5000
MAX_CHAT_CONTEXT_LENGTH = 12000
MAX_KEYWORDS = 15
CHAT_HISTORY_LIMIT = 10
