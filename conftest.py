"""Test environment defaults.

``api.main`` builds the app at import time, which reads required settings
from the environment.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests-only")
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
