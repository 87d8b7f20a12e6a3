"""
Gunicorn configuration for the CCS Membership service.

Usage:
    gunicorn ccs_membership.main:app -c gunicorn.conf.py
"""

import multiprocessing
import os

bind = os.getenv("BIND", "0.0.0.0:8000")

# Review traffic is light; cap workers so each holds a small DB pool
workers = min(multiprocessing.cpu_count() * 2 + 1, 4)

# Use Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# Request timeout (seconds); a decision makes several platform calls
timeout = 60

keepalive = 5

# Logging
accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = "info"
