"""Server-rendered storefront pages."""

from flask import Blueprint, current_app, render_template

from crushstore.modules.catalog.bootstrap import CatalogState
from crushstore.modules.catalog.routes import load_catalog

ui_bp = Blueprint("ui", __name__)


@ui_bp.get("/")
def home():
    view = load_catalog(current_app._get_current_object())
    if view.state is CatalogState.CONFIG_ERROR:
        return render_template("pages/config_error.html")
    return render_template("pages/home.html", view=view)
