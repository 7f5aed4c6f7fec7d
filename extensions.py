"""
Flask extensions instantiated without app binding.

These are bound to the application in app.py with init_app().
"""
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Database
db = SQLAlchemy()

# Schema migrations
migrate = Migrate()

# Rate Limiter (will be configured with app)
limiter = Limiter(key_func=get_remote_address)
