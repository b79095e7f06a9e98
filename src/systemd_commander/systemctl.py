from __future__ import annotations

from .models import Unit
from .util import glob_pattern

SYSTEMCTL = "systemctl"
JOURNALCTL = "journalctl"

DEFAULT_PROPERTIES = ("ActiveState", "SubState", "Names")
ALL_PROPERTIES = "all"


def properties_query(mode: str) -> str:
    """Return the ``--property`` part of a show request for a properties mode.

    ``""`` selects the default set, ``"all"`` drops the restriction and any
    other value is appended to the default set as extra comma-separated names.
    """
    if mode == ALL_PROPERTIES:
        return ""
    query = " --property=" + ",".join(DEFAULT_PROPERTIES)
    if mode:
        query += "," + mode
    return query


def _scope(user: bool) -> str:
    return "--user " if user else ""


def show_args(query: str, filter: str, user: bool = False) -> str:
    return f"{_scope(user)}show{query} -t service {glob_pattern(filter)}"


def control_args(action: str, unit_name: str, user: bool = False) -> str:
    return f"{_scope(user)}{action} {unit_name}"


def toggle_action(unit: Unit) -> str:
    return "stop" if unit.is_running else "start"


def journal_args(unit_name: str, user: bool = False, lines: int = 0) -> str:
    field = "_SYSTEMD_USER_UNIT" if user else "_SYSTEMD_UNIT"
    args = f"{_scope(user)}-o short-iso {field}={unit_name}"
    if lines > 0:
        args += f" -n {lines}"
    return args
