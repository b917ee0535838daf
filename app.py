# This file defines the main entry point and structure for the records viewer Flask web application.
# It utilizes the Application Factory pattern (`create_app`) to initialize and configure the Flask app.
# Key responsibilities include:
# - Creating the Flask application instance and loading settings.yaml.
# - Centralizing logging configuration (File and Console handlers).
# - Running the boot sequence: load the JSON collections, build the navigation tree,
#   register the view renderers and start the router.
# - Registering Blueprints (`viewer_bp`, `api_bp`) from the `views` directory.
# - Showing a full-page error instead of the viewer when the data cannot be loaded at all.
# - Providing a conditional block (`if __name__ == '__main__':`) to run the development server.

from flask import Flask, render_template
import os
import logging
from logging.handlers import RotatingFileHandler

from core.bootstrap import boot_viewer
from core.collection_loader import sources_from_config
from core.config import (
    DEFAULT_COLLECTIONS,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_SECTION,
    LOG_BACKUP_COUNT,
    LOG_FILE_NAME,
    LOG_FORMAT,
    LOG_MAX_BYTES,
)
from core.errors import BootstrapError
from core.navigation_config import NAV_SECTIONS
from core.settings_loader import get_app_config, get_collections
from core.utils import file_url, format_date, get_data_source, view_url
from views.viewer_views import VIEWER_EXTENSION, viewer_bp
from views.api_views import api_bp


def configure_logging(app: Flask) -> None:
    """File (rotating) and console logging for the app logger and the root logger."""
    # Remove Flask's default handlers
    app.logger.handlers.clear()
    app.logger.setLevel(logging.DEBUG)

    log_formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File Handler (Rotating)
    log_file_path = os.path.join(app.instance_path, LOG_FILE_NAME)
    try:
        file_handler = RotatingFileHandler(
            log_file_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
        )
        file_handler.setFormatter(log_formatter)
        file_handler.setLevel(logging.DEBUG)
        app.logger.addHandler(file_handler)
        # Replace the file handler a previous create_app() left on the root logger
        for handler in list(root_logger.handlers):
            if isinstance(handler, RotatingFileHandler):
                root_logger.removeHandler(handler)
                handler.close()
        root_logger.addHandler(file_handler)
        app.logger.info(f"File logging configured to: {log_file_path} (Level: DEBUG)")
    except OSError as e:
        app.logger.error(
            f"Failed to configure file logging to {log_file_path}: {e}", exc_info=True
        )

    # Console Handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(logging.INFO)
    app.logger.addHandler(console_handler)
    # Root logger only needs one console handler
    if not any(type(h) is logging.StreamHandler for h in root_logger.handlers):
        root_logger.addHandler(console_handler)
    # The app logger already writes to both handlers
    app.logger.propagate = False

    app.logger.info("Centralized logging configured (File & Console).")


def register_bootstrap_failure(app: Flask, error: Exception) -> None:
    """Answer every request with the fatal bootstrap page; the viewer is not started."""

    @app.route("/", defaults={"path": ""})
    @app.route("/<path:path>")
    def bootstrap_failed(path: str):
        return render_template("bootstrap_error.html", error=str(error)), 500


def create_app() -> Flask:
    """Factory function to create and configure the Flask app."""
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_mapping(
        SECRET_KEY="dev",  # Default secret key for development. CHANGE for production!
    )

    # Ensure the instance folder exists (needed for logging)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError as e:
        app.logger.error(
            f"Could not create instance folder at {app.instance_path}: {e}",
            exc_info=True,
        )

    configure_logging(app)

    # --- Settings ---
    app_cfg = get_app_config()
    collections = get_collections() or DEFAULT_COLLECTIONS
    app.config.update(
        DATA_SOURCE=get_data_source(app_cfg, app_root_path=app.root_path),
        DEFAULT_SECTION=app_cfg.get("default_section") or DEFAULT_SECTION,
        FETCH_TIMEOUT=float(app_cfg.get("fetch_timeout") or DEFAULT_FETCH_TIMEOUT),
        LOADER_MAX_WORKERS=app_cfg.get("loader_max_workers"),
    )
    app.logger.info(f"Data source set to: {app.config['DATA_SOURCE']}")

    @app.route("/hello")
    def hello() -> str:
        return "Hello, World! App factory is working."

    # Helpers the view templates use; needed before the first render at boot
    app.add_template_global(view_url)
    app.add_template_global(file_url)
    app.add_template_filter(format_date)

    # --- Boot the viewer ---
    try:
        # Renderers run during router start, so templates need the app context
        with app.app_context():
            viewer = boot_viewer(
                sources_from_config(collections),
                app.config["DATA_SOURCE"],
                NAV_SECTIONS,
                home_section=app.config["DEFAULT_SECTION"],
                fetch_timeout=app.config["FETCH_TIMEOUT"],
                max_workers=app.config["LOADER_MAX_WORKERS"],
            )
    except BootstrapError as e:
        app.logger.critical(f"Critical init error, viewer not started: {e}", exc_info=True)
        app.extensions["bootstrap_error"] = str(e)
        register_bootstrap_failure(app, e)
        return app

    app.extensions[VIEWER_EXTENSION] = viewer

    # --- Register Blueprints ---
    app.register_blueprint(viewer_bp)
    app.register_blueprint(api_bp)

    app.logger.info("Registered Blueprints:")
    app.logger.info(f"- {viewer_bp.name} (prefix: {viewer_bp.url_prefix})")
    app.logger.info(f"- {api_bp.name} (prefix: {api_bp.url_prefix})")

    return app


# --- Application Execution ---
if __name__ == "__main__":
    app = create_app()  # Create the app instance using the factory
    app.run(debug=True, host="0.0.0.0")
