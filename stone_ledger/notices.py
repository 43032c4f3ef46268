"""
Notices

A notice is a one-shot message queued during one page run and shown on
the next. The UI reruns the page after every change so the totals are
redrawn, and anything shown before the rerun is lost; queuing the
confirmation keeps it visible.

The queue lives in any mutable mapping. The Streamlit page passes
`st.session_state`; tests pass a plain dict.
"""

from collections.abc import MutableMapping
from typing import NamedTuple, Optional


NOTICE_KEY = "_stone_ledger_notice"

LEVELS = ("success", "info", "warning", "error")


class Notice(NamedTuple):
    level: str
    message: str


def push_notice(state: MutableMapping, message: str, level: str = "success") -> None:
    """Queue a notice, replacing any notice not yet shown."""
    if level not in LEVELS:
        raise ValueError(f"Unknown notice level: {level}")
    state[NOTICE_KEY] = Notice(level, message)


def pop_notice(state: MutableMapping) -> Optional[Notice]:
    """Take the queued notice, if any. Each notice is returned once."""
    return state.pop(NOTICE_KEY, None)
