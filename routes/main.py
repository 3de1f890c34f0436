"""
Main routes (home).

The packing list overview is the home page.
"""

from flask import Blueprint, redirect, url_for

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def index():
    """Redirect root to the packing list overview."""
    return redirect(url_for("packing_lists.overview"))
