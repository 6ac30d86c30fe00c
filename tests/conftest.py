import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'trellis'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from trellis.core.config import clear_config_cache
from trellis.core.log import reset_logging_for_tests
from helpers.site_factory import SiteFactory


@pytest.fixture(autouse=True)
def _isolate_trellis(monkeypatch: pytest.MonkeyPatch):
    """Drop TRELLIS_* env vars, cached config and installed log handlers around each test."""
    for key in list(os.environ):
        if key.startswith("TRELLIS_"):
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()
    reset_logging_for_tests()


@pytest.fixture
def factory(tmp_path: Path) -> SiteFactory:
    return SiteFactory(tmp_path / "site")


@pytest.fixture
def omega_site(factory: SiteFactory) -> SiteFactory:
    """A base theme ``omega`` with a sub-theme ``corporate`` set as default."""
    factory.theme(
        "omega",
        label="Omega",
        body="""
        settings[toggle_logo] = 0
        settings[layout] = simple
        settings[omega_setting] = base
        """,
    )
    factory.theme(
        "corporate",
        base="omega",
        label="Corporate",
        body="""
        settings[omega_setting] = sub
        """,
    )
    factory.configure(themes={"default": "corporate", "enabled": ["omega", "corporate"]})
    return factory
