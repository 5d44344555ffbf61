import os
import tempfile

# Must be set before anything under app is imported
_test_dir = tempfile.mkdtemp(prefix="places_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_dir}/places_test_db.sqlite"
os.environ["UPLOAD_DIR"] = os.path.join(_test_dir, "uploads")
os.environ["LOCATIONIQ_TOKEN"] = "test-token"

from tests.fixtures import *  # noqa: E402,F401,F403
