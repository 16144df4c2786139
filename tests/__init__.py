"""Test package. Points settings at in-memory SQLite before kalat is imported."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret-with-enough-bytes-for-hs256"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("BOOTSTRAP_ACCOUNTS", None)
