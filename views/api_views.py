# Purpose: JSON API of the records viewer: the navigation tree, route resolution for
# client-side hash navigation, raw collection payloads and a boot status summary.

"""
Blueprint for the viewer's JSON endpoints under /api.
"""
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify

from core.router import RouteResolution
from core.route_codec import to_hash
from views.viewer_views import get_viewer

api_bp = Blueprint("api_bp", __name__, url_prefix="/api")


def resolution_to_dict(resolution: RouteResolution, nav) -> Dict[str, Any]:
    route = resolution.route
    return {
        "path": resolution.path,
        "hash": to_hash(route) if route else None,
        "route": (
            {"section": route.section, "subsection": route.subsection, "id": route.id}
            if route
            else None
        ),
        "renderer": resolution.renderer,
        "redirected": resolution.redirected,
        "error": resolution.error,
        "html": str(resolution.html),
        "nav": nav,
    }


@api_bp.route("/nav")
def nav_tree():
    """The sidebar tree with the flags of the current navigation state."""
    viewer = get_viewer()
    return jsonify({"nav": viewer.context.nav_tree.to_dict(viewer.syncer.state)})


@api_bp.route("/route/")
@api_bp.route("/route/<path:route_path>")
def resolve_route(route_path: str = ""):
    """Navigate to ``route_path`` and return where the router settled."""
    viewer = get_viewer()
    resolution = viewer.router.navigate(route_path)
    nav = viewer.context.nav_tree.to_dict(resolution.nav_state)
    return jsonify(resolution_to_dict(resolution, nav))


@api_bp.route("/data/<key>")
def collection_data(key: str):
    """Raw payload of one loaded collection."""
    data = get_viewer().context.data
    if key not in data:
        return jsonify({"error": f"Unknown collection '{key}'"}), 404
    payload = data[key]
    if payload is None:
        current_app.logger.warning(f"API request for collection '{key}' which failed to load")
        return jsonify({"error": f"Collection '{key}' failed to load"}), 503
    return jsonify(payload)


@api_bp.route("/status")
def status():
    """Which collections loaded, which failed, and which renderers are registered."""
    viewer = get_viewer()
    data = viewer.context.data
    return jsonify(
        {
            "data_source": viewer.data_source,
            "loaded": [key for key in data if data[key] is not None],
            "failed": data.failed,
            "renderers": viewer.registry.names(),
            "reports": len(viewer.context.reports),
            "home": viewer.router.home_path,
        }
    )
