import os
import uuid

# Record service
MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "studentFeedback")
COLLECTION_NAME = os.getenv("COLLECTION_NAME", "students")
MONGODB_TIMEOUT_MS = int(os.getenv("MONGODB_TIMEOUT_MS", 5000))
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))

# Admin console
RECORD_SERVICE_URL = os.getenv("RECORD_SERVICE_URL", f"http://localhost:{PORT}")
CONSOLE_HOST = os.getenv("CONSOLE_HOST", "0.0.0.0")
CONSOLE_PORT = int(os.getenv("CONSOLE_PORT", 8080))
SECRET_KEY = os.getenv("SECRET_KEY", str(uuid.uuid4()))
CONSOLE_SESSION_LIMIT = int(os.getenv("CONSOLE_SESSION_LIMIT", 256))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
