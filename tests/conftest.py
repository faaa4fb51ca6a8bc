import sys
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC = REPO_ROOT / "src"
FIXTURES = Path(__file__).resolve().parent / "fixtures"

# Prefer repo sources over any installed package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def sample_csv():
    return FIXTURES / "listings_sample.csv"


@pytest.fixture
def sample_collection(sample_csv):
    from airbnb_explorer.loader import load_collection

    return load_collection(sample_csv)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    from airbnb_explorer.settings import reset_settings_cache

    for name in (
        "ABNB_LOG_LEVEL",
        "ABNB_LOG_JSON",
        "ABNB_TOP_HOSTS_LIMIT",
        "ABNB_MIN_HOST_LISTINGS",
        "ABNB_EXPORT_ROOT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()
