"""Flask app factory for the OmniBus booking demo."""

import os

import click
from flask import Flask, current_app
from flask_caching import Cache

from ..controller import ApplicationController, build_controller

# Initialize extensions
flask_cache = Cache()

CONTROLLER_EXTENSION = 'omnibus'


def create_app(config_name=None, controller=None):
    """Create and configure Flask application.

    Args:
        config_name: Configuration name ('development', 'testing', 'production', or None for auto-detect)
        controller: Pre-built ApplicationController (built from OmnibusConfig if omitted)

    Returns:
        Flask application instance
    """
    app = Flask(__name__)

    # Auto-detect configuration if not specified
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    from .config import config
    app.config.from_object(config.get(config_name, config['default']))

    flask_cache.init_app(app)

    app.extensions[CONTROLLER_EXTENSION] = controller or build_controller()

    register_blueprints(app)
    register_cli_commands(app)

    app.logger.info(f"OmniBus web app created with '{config_name}' configuration")
    return app


def get_controller() -> ApplicationController:
    """Controller bound to the current application."""
    return current_app.extensions[CONTROLLER_EXTENSION]


def register_blueprints(app):
    """Register application blueprints."""
    from .routes.main import main_bp
    from .routes.api import api_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api')


def register_cli_commands(app):
    """Register CLI commands for booking data management."""

    @app.cli.command('reset-bookings')
    @click.option('--yes', is_flag=True, help='Confirm the reset without prompting')
    def reset_bookings(yes):
        """Restore the demo bookings and clear the persisted slot."""
        if not yes:
            yes = click.confirm('Delete all bookings and restore the demo data?')
        if get_controller().reset_data(yes):
            print("Bookings reset to demo data.")
        else:
            print("Reset cancelled.")
