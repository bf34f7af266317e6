"""
Gunicorn configuration for the dashboard API.

Usage:
    gunicorn core.wsgi:application -c deployment/gunicorn/gunicorn_config.py
"""
import multiprocessing
import os

bind = os.getenv("GUNICORN_BIND", "unix:/run/dashboard-api/gunicorn.sock")
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100

# A report fans out to several queries at once; allow for slow databases
timeout = int(os.getenv("GUNICORN_TIMEOUT", 60))
keepalive = 5

# Logging
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'

proc_name = "dashboard-api"


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Dashboard API ready, spawning %s workers", workers)


def post_worker_init(worker):
    """Called after a worker has initialized the application."""
    worker.log.info("Worker %s serving dashboard statistics", worker.pid)


def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal (request timeout)."""
    worker.log.warning("Worker %s aborted, a statistics request exceeded %ss", worker.pid, timeout)
