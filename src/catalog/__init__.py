"""Product catalog REST API.

FastAPI service exposing create/read/update/delete operations over a single
PostgreSQL ``products`` table.
"""

__version__ = "0.1.0"
