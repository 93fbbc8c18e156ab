"""
Post-login navigation for the authentication page.

Maps a signed-in user's role to the dashboard they land on. This belongs to
the auth page, not the gate: the gate only hands over the ``redirect`` hint.
"""

from types import MappingProxyType
from typing import Optional
from urllib.parse import urlsplit

DEFAULT_LANDING_PATH = "/"

ROLE_LANDING_PATHS = MappingProxyType({
    "teacher": "/teacher",
    "super_admin": "/super-admin",
    "admin": "/admin",
    "student": "/student-portal",
})

# Dashboard areas a role may already be browsing without being bounced.
ROLE_HOME_PREFIXES = MappingProxyType({
    "admin": "/admin",
    "super_admin": "/admin",
    "teacher": "/teacher",
    "student": "/student-portal",
})


def landing_path_for(role: Optional[str]) -> str:
    """Dashboard path for ``role``; unknown roles land on the home page."""
    return ROLE_LANDING_PATHS.get(role or "", DEFAULT_LANDING_PATH)


def is_safe_redirect(target: Optional[str]) -> bool:
    """True for same-site absolute paths such as ``/admin/reports``."""
    if not target or not target.startswith("/") or target.startswith("//"):
        return False
    if "\\" in target:
        return False
    parts = urlsplit(target)
    return not parts.scheme and not parts.netloc


def post_login_path(role: Optional[str], redirect: Optional[str] = None) -> str:
    """Where to send a user after login.

    The ``redirect`` hint left by the gate wins when it points back into
    this site; anything else falls back to the role's landing path.
    """
    if is_safe_redirect(redirect):
        return redirect
    return landing_path_for(role)


def is_role_home(role: Optional[str], path: str) -> bool:
    prefix = ROLE_HOME_PREFIXES.get(role or "")
    if prefix is None:
        return False
    return path == prefix or path.startswith(prefix + "/")
