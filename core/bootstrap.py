# Purpose: Boot sequence of the records viewer, in the order the components depend on:
# load collections -> build context and navigation tree -> register renderers -> start router.
# Nothing here runs until create_app() calls boot_viewer().

import importlib
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from core.app_context import AppContext
from core.collection_loader import CollectionLoader, CollectionSource
from core.config import DEFAULT_FETCH_TIMEOUT, DEFAULT_SECTION, VIEW_MODULES
from core.errors import BootstrapError
from core.nav_sync import NavSyncer
from core.nav_tree import load_nav_sections
from core.router import Location, Router
from core.view_registry import ContentArea, Dispatcher, ViewRegistry

logger = logging.getLogger(__name__)


@dataclass
class Viewer:
    """Everything a request handler needs, created once per application."""

    context: AppContext
    registry: ViewRegistry
    router: Router
    data_source: str

    @property
    def syncer(self) -> NavSyncer:
        return self.router.syncer


def register_view_modules(
    registry: ViewRegistry, context: AppContext, module_names: Sequence[str] = VIEW_MODULES
) -> None:
    """Import each view module and let it register its renderers.

    A module that fails to import or to register is logged and skipped;
    routes that need its renderer fall back to the "not available" placeholder.
    """
    for module_name in module_names:
        try:
            module = importlib.import_module(module_name)
        except Exception as imp_err:
            logger.error(f"View module import failed: {module_name}: {imp_err}", exc_info=True)
            continue
        register = getattr(module, "register", None)
        if register is None:
            logger.warning(f"View module {module_name} has no register() function")
            continue
        try:
            register(registry, context)
        except Exception as reg_err:
            logger.error(f"View module registration failed: {module_name}: {reg_err}", exc_info=True)
            continue
    logger.info(f"Registered renderers: {registry.names()}")


def boot_viewer(
    sources: Sequence[CollectionSource],
    data_source: str,
    nav_sections: Sequence[Mapping[str, Any]],
    home_section: str = DEFAULT_SECTION,
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
    max_workers: Optional[int] = None,
    view_modules: Sequence[str] = VIEW_MODULES,
    loader: Optional[CollectionLoader] = None,
) -> Viewer:
    """
    Run the boot sequence and return a started Viewer.

    Raises:
        BootstrapError: when the collections cannot be loaded at all. The
            navigation tree is not built and the router is not started.
    """
    loader = loader or CollectionLoader(sources, data_source, timeout=fetch_timeout, max_workers=max_workers)
    try:
        data = loader.load_all()
    except BootstrapError:
        raise
    except Exception as e:
        raise BootstrapError(f"Loading collections failed: {e}") from e

    context = AppContext.build(data, load_nav_sections(nav_sections), home_section=home_section)

    registry = ViewRegistry()
    register_view_modules(registry, context, view_modules)

    location = Location()
    content = ContentArea()
    dispatcher = Dispatcher(registry, content, location.assign, home_section=home_section)
    router = Router(location, NavSyncer(context.nav_tree), dispatcher, home_section)
    router.start()

    return Viewer(context=context, registry=registry, router=router, data_source=data_source)
