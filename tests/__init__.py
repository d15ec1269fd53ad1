"""Test settings: in-memory SQLite, cheap bcrypt, throwaway upload dir, no error log file."""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="tracker-uploads-")
os.environ["ERROR_LOG_PATH"] = ""
os.environ["APP_ENV"] = "dev"
