"""Gunicorn configuration for production."""

# Application
wsgi_app = 'zakatbook:create_app()'

# Server socket
bind = '0.0.0.0:8080'

# Single worker: the price hint cell and SQLite state live in one process
workers = 1
threads = 4
worker_class = 'gthread'
timeout = 30
keepalive = 2

# Logging
accesslog = '-'
errorlog = '-'
loglevel = 'info'

# Process naming
proc_name = 'zakatbook'
