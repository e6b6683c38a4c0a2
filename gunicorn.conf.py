"""
Gunicorn configuration for linkgate
"""
import multiprocessing
import os

# Server socket
bind = os.getenv("LINKGATE_BIND", "127.0.0.1:8080")
backlog = 2048

# Worker processes
workers = int(os.getenv("LINKGATE_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
timeout = 120
keepalive = 5

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "linkgate"

# Server mechanics
daemon = False
pidfile = None
user = None
group = None
tmp_upload_dir = None

capture_output = True
enable_stdio_inheritance = True

# Each worker opens its own database handle in the app lifespan
preload_app = False

# Graceful timeout
graceful_timeout = 30

reload = False
