"""Tests run against SQLite with a cheap bcrypt cost; set before storefront is imported."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "storefront-test-secret-0123456789abcdef"
os.environ["JWT_EXPIRE_MINUTES"] = "60"
os.environ.pop("STAFF_CAPABILITIES", None)
os.environ.pop("API_V1_PREFIX", None)
