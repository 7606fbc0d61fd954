"""Test package. Settings are read at import time, so point them at SQLite before anything imports gatekeeper."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["JWT_SECRET"] = "test-secret-not-for-production-use-only"
os.environ["JWT_ISSUER"] = "gatekeeper-api"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["API_PREFIX"] = ""
