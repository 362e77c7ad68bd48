"""Settings parsing."""
from subledger.core.config import Settings


def test_database_url_override():
    s = Settings(DATABASE_URL="sqlite:///x.db")
    assert s.database_url == "sqlite:///x.db"


def test_database_url_from_components():
    s = Settings(DATABASE_URL=None, POSTGRES_HOST="db", POSTGRES_DB="ledger")
    assert s.database_url == "postgresql+psycopg://postgres:postgres@db:5432/ledger"


def test_blank_owner_is_none():
    s = Settings(OWNER_ID="    ")
    assert s.OWNER_ID is None


def test_defaults():
    s = Settings(OWNER_ID="owner")
    assert s.OWNER_ID == "owner"
    assert s.SUBSCRIPTION_CAPACITY == 100_000
    assert s.API_PREFIX == "/api"
