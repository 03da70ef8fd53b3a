"""
Gunicorn configuration for the Reclaim API server.

  gunicorn -c gunicorn.conf.py

Env vars that override defaults:
  PORT     — TCP port to bind
  WORKERS  — number of worker processes (default: 2)
  TIMEOUT  — seconds before a silent worker is restarted (default: 60)
"""
import os

from reclaim.core.logging_config import LOGGING_CONFIG

wsgi_app = "reclaim.main:app"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"
workers = int(os.environ.get("WORKERS", "2"))

# Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5
timeout = int(os.environ.get("TIMEOUT", "60"))
graceful_timeout = 30

# Same handlers/format as the application loggers.
logconfig_dict = LOGGING_CONFIG
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'
