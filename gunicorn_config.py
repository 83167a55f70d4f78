import multiprocessing

from decouple import config

# Server socket
bind = config("GUNICORN_BIND", default="0.0.0.0:8000")
backlog = 2048

# Worker processes
# The SQLite seat lock is process-local, so SQLite deployments run one worker
if config("DB_ENGINE", default="django.db.backends.sqlite3").endswith("sqlite3"):
    workers = 1
else:
    workers = config("GUNICORN_WORKERS", default=multiprocessing.cpu_count() * 2 + 1, cast=int)
worker_class = "gthread"
threads = config("GUNICORN_THREADS", default=4, cast=int)
max_requests = 1000
max_requests_jitter = 50

# Timeout settings
timeout = 60
keepalive = 2

# Logging
accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = config("LOG_LEVEL", default="info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(M)sms "%(a)s"'

# Process naming
proc_name = "seatdesk_gunicorn"

# Server mechanics
preload_app = True
daemon = False
pidfile = "/tmp/seatdesk_gunicorn.pid"
