"""
EditorLib - Editor session and settings

This module provides the session state machine a UI shell drives, the tool
catalog, and persisted editor settings.
"""

from OE_Libs.EditorLib.tools import (
    NO_IMAGE,
    ToolInfo,
    ToolType,
    coerce_tool,
    get_tool_catalog,
)
from OE_Libs.EditorLib.editor_settings import (
    EditorSettings,
    load_settings,
    save_settings,
)
from OE_Libs.EditorLib.editor_session import EditorSession

__all__ = [
    "NO_IMAGE",
    "ToolInfo",
    "ToolType",
    "coerce_tool",
    "get_tool_catalog",
    "EditorSettings",
    "load_settings",
    "save_settings",
    "EditorSession",
]
