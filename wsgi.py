"""
WSGI entry point for the clinic back-office.

Usage examples:
    Gunicorn: gunicorn -w 4 -b 0.0.0.0:8000 wsgi:app
    uWSGI: uwsgi --http :8000 --wsgi-file wsgi.py --callable app
"""

import os

from app import create_app

app = create_app(os.environ.get('FLASK_CONFIG', 'production'))

# Some hosts expect the variable to be called 'application'
application = app

if __name__ == "__main__":
    app.run()
