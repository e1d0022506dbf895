# =============================================================================
# CONFTEST - Global pytest fixtures
# =============================================================================
# Puts the project root on sys.path and isolates the environment
# =============================================================================

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))


# =============================================================================
# ENVIRONMENT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_env(tmp_path: Path):
    """Point data files at a temp dir and disable the AI generators."""
    env_vars = {
        "DATA_DIR": str(tmp_path / "data"),
        "OPENAI_API_KEY": "",
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "ERROR",
        "CLEANUP_INTERVAL_HOURS": "0",
    }
    with patch.dict(os.environ, env_vars):
        yield
