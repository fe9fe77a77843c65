import os

wsgi_app = "settingspanel.wsgi:application"
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "2"))
worker_class = "gthread"
timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))
loglevel = os.getenv("GUNICORN_LOGLEVEL", "info")
errorlog = "-"
accesslog = "-"
