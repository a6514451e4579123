"""
main.py

Flask backend for the watermark upload gateway.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, redis, celery, httpx
  - Infrastructure: Redis server (upload records and expiry index, Celery broker)

Notes:
  - Endpoints live under /api/ with Swagger docs at /api/docs
  - Uploaded files are served from /files/<stored_name>
  - Run a Celery worker with beat for the expiry sweep:
      celery -A celery_app.celery_app worker -B -Q default,cleanup_queue
"""

import os

from app_factory import create_app

app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("PORT", os.getenv("FLASK_PORT", 3001)))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"

    app.run(host=host, port=port, debug=debug)
