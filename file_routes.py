"""
Static File Routes

This module provides the Flask blueprint that maps every request path onto
a file or directory under the configured root directory.
"""
import os
import stat
import logging
from typing import List, Tuple
from urllib.parse import quote

from flask import Blueprint, abort, current_app, redirect, render_template_string, request, send_from_directory
from werkzeug.security import safe_join

# Configure logging
logger = logging.getLogger(__name__)

# Create Blueprint
files_bp = Blueprint('files', __name__)

INDEX_FILE = "index.html"

LISTING_HTML = """<!doctype html>
<meta name="viewport" content="width=device-width">
<pre>
{% for name, href in entries -%}
<a href="{{ href }}">{{ name }}</a>
{% endfor -%}
</pre>
"""


def _redirect(location: str):
    """Permanent redirect to location, keeping the query string.

    The location is a decoded request path, so it is percent-quoted again
    before it goes into the header.
    """
    location = quote(location)
    if request.query_string:
        location = f"{location}?{request.query_string.decode('latin-1')}"
    return redirect(location, code=301)


def list_directory(path: str) -> List[Tuple[str, str]]:
    """Return (display name, href) pairs for a directory, sorted by name.

    Subdirectories get a trailing slash so their links resolve relative to
    the directory itself. Names are escaped by the template, hrefs are
    percent-quoted here from the raw filesystem bytes, so names that are not
    valid UTF-8 still link to the right file.
    """
    names = []
    with os.scandir(path) as it:
        for entry in it:
            names.append(entry.name + "/" if entry.is_dir() else entry.name)
    entries = []
    for name in sorted(names):
        raw = os.fsencode(name)
        entries.append((raw.decode('utf-8', 'replace'), quote(raw)))
    return entries


@files_bp.route('/', defaults={'subpath': ''}, methods=['GET', 'HEAD'])
@files_bp.route('/<path:subpath>', methods=['GET', 'HEAD'])
def serve_path(subpath):
    """Serve a file, a directory index or a generated directory listing."""
    root = current_app.config["ROOT_DIR"]
    full_path = safe_join(root, subpath)
    if full_path is None:
        logger.warning(f"Rejected path outside the root directory: {request.path}")
        abort(404)

    # PermissionError propagates to the 403 handler
    try:
        mode = os.stat(full_path).st_mode
    except (FileNotFoundError, NotADirectoryError):
        abort(404)

    if stat.S_ISDIR(mode):
        if not request.path.endswith('/'):
            return _redirect(request.path + '/')
        index_path = os.path.join(full_path, INDEX_FILE)
        if os.path.isfile(index_path):
            return send_from_directory(full_path, INDEX_FILE)
        return render_template_string(LISTING_HTML, entries=list_directory(full_path))

    if not stat.S_ISREG(mode):
        abort(404)

    if request.path.endswith('/'):
        return _redirect(request.path.rstrip('/'))
    return send_from_directory(root, subpath)


@files_bp.app_errorhandler(PermissionError)
def handle_permission_error(error):
    logger.warning(f"Permission denied for {request.path}: {error}")
    return "403 Forbidden\n", 403, {"Content-Type": "text/plain; charset=utf-8"}


@files_bp.app_errorhandler(OSError)
def handle_os_error(error):
    """Any other filesystem failure becomes a 500 for this request only."""
    logger.error(f"Error reading {request.path}: {error}", exc_info=True)
    return "500 Internal Server Error\n", 500, {"Content-Type": "text/plain; charset=utf-8"}
