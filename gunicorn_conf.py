"""Gunicorn settings for the gateway.

    gunicorn api_gateway.main:app -c gunicorn_conf.py
"""

import os

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"

# Metrics live in per-process registries; keep one worker unless scraping each
workers = int(os.getenv("GUNICORN_WORKERS", "1"))
worker_class = "uvicorn.workers.UvicornWorker"

# Above the 5 s forward timeout so a slow backend never trips the worker watchdog
timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))
graceful_timeout = 10

# Request logging is done in-app
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
proc_name = "api-gateway"
