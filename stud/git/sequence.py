"""Sequence-editor script used to autosquash without an interactive editor.

``git rebase -i --autosquash`` already moves ``fixup!``/``squash!`` commits
next to their targets; the script only swaps their ``pick`` action for the
matching one. It is run by git with the todo file path as ``$1`` and edits it
in place with ``sed -i.bak``, which leaves a ``<todo>.bak`` copy behind.
"""

SCRIPT_PREFIX = "stud-rebase-"
BACKUP_SUFFIX = ".bak"

SEQUENCE_EDITOR_SCRIPT = """#!/bin/sh
# Mark fixup!/squash! commits in the rebase todo passed as $1
sed -i.bak -E '
    /^pick [a-f0-9]+ fixup!/ {
        s/^pick/fixup/
    }
    /^pick [a-f0-9]+ squash!/ {
        s/^pick/squash/
    }
' "$1"
"""


def build_sequence_editor_script() -> str:
    """Return the POSIX shell source of the sequence editor."""
    return SEQUENCE_EDITOR_SCRIPT
