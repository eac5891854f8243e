"""Helpers for handling database connection URLs."""

from sqlalchemy.engine import make_url

# Hosting platforms hand out Heroku-style URLs; SQLAlchemy only knows "postgresql".
_LEGACY_POSTGRES_SCHEME = "postgres://"
_POSTGRES_SCHEME = "postgresql://"


def normalize_database_url(url: str) -> str:
    """Rewrite a ``postgres://`` URL to the ``postgresql://`` scheme."""
    url = url.strip()
    if url.startswith(_LEGACY_POSTGRES_SCHEME):
        return _POSTGRES_SCHEME + url[len(_LEGACY_POSTGRES_SCHEME):]
    return url


def redact_database_url(url: str) -> str:
    """Return the URL with its password masked so it can be logged."""
    try:
        return make_url(normalize_database_url(url)).render_as_string(hide_password=True)
    except Exception:
        # Unparseable URLs are never echoed back verbatim
        return "<unparseable database url>"


def describe_database_url(url: str) -> dict[str, str | int | None]:
    """Break a URL into the parts worth logging during diagnostics."""
    parsed = make_url(normalize_database_url(url))
    return {
        "backend": parsed.get_backend_name(),
        "driver": parsed.get_driver_name(),
        "host": parsed.host,
        "port": parsed.port,
        "database": parsed.database,
        "username": parsed.username,
    }
