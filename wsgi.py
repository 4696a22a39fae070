"""
WSGI entry point for Crime Scene application.
Used for production deployment with Gunicorn.
"""

from app import app, app_config

if __name__ == "__main__":
    # For development without Gunicorn
    app.run(host=app_config.host, port=app_config.port, debug=True, threaded=True)
else:
    # For production WSGI servers
    application = app
