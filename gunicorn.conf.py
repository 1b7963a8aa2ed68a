"""Gunicorn config for container deployment."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Uvicorn async workers; each holds its own copy of the sales DataFrame.
# Tune via WEB_CONCURRENCY env var.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Large extracts aggregate in one request
timeout = 120
graceful_timeout = 30

keepalive = 65

accesslog = "-"
errorlog = "-"
loglevel = "info"
