"""
Main Flask application for the personal finance API.
"""
import os
import logging
import click
from flask import Flask, request, redirect

from extensions import db, limiter, migrate
from config import config, get_config_name
from blueprints import register_blueprints

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

# Load configuration from centralized config module
config_name = get_config_name()
app.config.from_object(config[config_name])

# Initialize extensions with app
db.init_app(app)
migrate.init_app(app, db)  # Flask-Migrate for database migrations
limiter.init_app(app)  # Reads RATELIMIT_* from app.config

register_blueprints(app)


# ============================================================================
# Security Middleware
# ============================================================================

@app.before_request
def enforce_https():
    """Redirect HTTP to HTTPS in production."""
    if not app.debug and not app.testing:
        # Check X-Forwarded-Proto header (set by reverse proxies)
        if request.headers.get('X-Forwarded-Proto') == 'http':
            url = request.url.replace('http://', 'https://', 1)
            return redirect(url, code=301)


@app.after_request
def add_security_headers(response):
    """Add security headers to all responses."""
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer'
    # Responses carry session keys and balances
    response.headers['Cache-Control'] = 'no-store'

    if not app.debug:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

    return response


def init_db():
    """Create database tables if they don't exist.

    Schema changes go through Flask-Migrate ('flask db migrate' / 'flask db upgrade').
    """
    with app.app_context():
        # Register all models with the metadata
        import models  # noqa: F401

        db.create_all()
        logger.info(f"Database tables ready ({config_name})")


# Call initialization when module is loaded
init_db()


@app.cli.command('init-db')
def init_db_command():
    """Initialize the database."""
    db.create_all()
    click.echo('Database initialized!')


@app.cli.command('seed-demo')
@click.option('--username', required=True, help='User whose data is replaced with demo data')
def seed_demo_command(username):
    """Replace a user's accounts, categories and transactions with demo data.

    Example:
        flask seed-demo --username alice
    """
    from api_errors import APIError
    from services.user_service import UserService

    try:
        user_id = UserService.get_user_id_from_username(username)
        created = UserService.auto_populate_demo_data(user_id)
    except APIError as e:
        raise click.ClickException(e.message)

    click.echo(f"Demo data created for {username}:")
    for key, count in created.items():
        click.echo(f"  {key}: {count}")


if __name__ == '__main__':
    # Default to 5001 for local development (avoids macOS AirPlay Receiver conflict)
    port = int(os.environ.get('PORT', 5001))

    # Allow disabling auto-reload for stable testing (NO_RELOAD=1 python app.py)
    use_reloader = os.environ.get('NO_RELOAD') != '1'

    # Debug mode is set by config (True for development, False for production)
    app.run(debug=app.debug, host='0.0.0.0', port=port, use_reloader=use_reloader)
