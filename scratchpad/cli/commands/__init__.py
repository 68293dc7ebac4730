"""
FILE: scratchpad/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .tasks import (
    add,
    ls,
    show,
    done,
    edit,
    note,
    focus,
    color,
    collapse,
    mv,
    rm,
    clear,
)
from .pads import (
    pad_add,
    pad_ls,
    pad_rm,
    pad_rename,
    pad_color,
    pad_select,
)
from .subtasks import (
    sub_add,
    sub_done,
    sub_edit,
    sub_rm,
    sub_mv,
)
from .system import (
    version,
    export,
    import_,
    float_,
)

__all__ = [
    "add",
    "ls",
    "show",
    "done",
    "edit",
    "note",
    "focus",
    "color",
    "collapse",
    "mv",
    "rm",
    "clear",
    "pad_add",
    "pad_ls",
    "pad_rm",
    "pad_rename",
    "pad_color",
    "pad_select",
    "sub_add",
    "sub_done",
    "sub_edit",
    "sub_rm",
    "sub_mv",
    "version",
    "export",
    "import_",
    "float_",
]
