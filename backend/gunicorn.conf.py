import os

# Bind & workers (sync workers: one request per worker at a time)
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
worker_class = "sync"
threads = 1
timeout = 60
graceful_timeout = 30
keepalive = 5

# App: keys and the ledger backend are wired once per worker by create_app()
wsgi_app = "auth_service:create_app()"

# Logs to stdout/stderr; the app itself emits JSON lines
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Proxy headers
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")
proxy_protocol = False
