import pytest
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from strength_engine.app import app, pr_cache

@pytest.fixture()
def client():
    app.config.update(TESTING=True)
    pr_cache.clear_cache()
    with app.test_client() as client:
        yield client
