# Usage: gunicorn -c gunicorn.conf.py "merchant_auth:create_app()"
import os

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust proxy headers from the gateway
forwarded_allow_ips = "*"
proxy_protocol = False
