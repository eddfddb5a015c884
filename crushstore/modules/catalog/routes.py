from __future__ import annotations

from flask import Blueprint, Flask, current_app

from crushstore.app.common.errors import abort_json
from crushstore.modules.catalog.bootstrap import AppConfigSource, CatalogBootstrapper, CatalogState, CatalogView
from crushstore.modules.storefront.context import client_factory

bp = Blueprint("catalog", __name__)


def load_catalog(app: Flask) -> CatalogView:
    """Bootstrap the catalog for one page load."""
    view, _ = CatalogBootstrapper(AppConfigSource(app.config), client_factory(app)).run()
    return view


@bp.get("/catalog")
def get_catalog():
    """GET /api/catalog - featured and full product lists in platform order."""
    view = load_catalog(current_app._get_current_object())
    if view.state is not CatalogState.READY:
        abort_json(503, "catalog_unavailable", "Unable to load Shopify configuration.", {"reason": view.error.code})
    return view.to_dict(), 200
