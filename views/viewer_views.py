# views/viewer_views.py
# Purpose: Page routes of the records viewer. Every page is one route of the viewer:
# the path after /view/ is handed to the router, which syncs the sidebar state and lets
# the matching renderer fill the content area. Also serves the report files.

"""
Blueprint for the viewer pages (/, /view/<route>) and report files (/files/<path>).
"""
from flask import Blueprint, abort, current_app, redirect, render_template, send_from_directory

from core.bootstrap import Viewer
from core.collection_loader import is_remote
from core.utils import view_url

viewer_bp = Blueprint("viewer", __name__)

VIEWER_EXTENSION = "records_viewer"


def get_viewer() -> Viewer:
    """The Viewer booted by create_app()."""
    viewer = current_app.extensions.get(VIEWER_EXTENSION)
    if viewer is None:
        current_app.logger.error("Records viewer requested but it was never booted")
        abort(503)
    return viewer


@viewer_bp.route("/")
def index():
    """Start page: the home route."""
    return redirect(view_url(get_viewer().router.home_path))


@viewer_bp.route("/view/")
@viewer_bp.route("/view/<path:route_path>")
def view_route(route_path: str = ""):
    """Resolve ``route_path`` and render the viewer page for it."""
    viewer = get_viewer()
    resolution = viewer.router.navigate(route_path)
    if resolution.redirected:
        current_app.logger.info(f"Route '{route_path}' redirected to '{resolution.path}'")
        return redirect(view_url(resolution.path))

    return render_template(
        "viewer.html",
        nav=viewer.context.nav_tree.to_dict(resolution.nav_state),
        content=resolution.html,
        current_path=resolution.path,
        renderer=resolution.renderer,
        failed_collections=viewer.context.data.failed,
    )


@viewer_bp.route("/files/<path:filename>")
def report_file(filename: str):
    """Report documents live next to the collections; remote sources are redirected to."""
    data_source = get_viewer().data_source
    if is_remote(data_source):
        return redirect(f"{data_source.rstrip('/')}/{filename}")
    return send_from_directory(data_source, filename)
