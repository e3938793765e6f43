"""WSGI entrypoint for Gunicorn.

Usage:
  gunicorn -w 2 -b 0.0.0.0:8000 wsgi:app

Each worker process keeps its own rate limiter, so run ingestion-heavy
deployments with a single worker to keep to one call per second.
"""

from lotto_archive import create_app

app = create_app()
