"""
FILE: scratchpad/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - PALETTE: Fixed 8-color palette cycled for new tasks and scratchpads
  - DEFAULT_ACCENT: Fallback color for invalid hex values
  - DEFAULT_SCRATCHPAD_NAME / DEFAULT_SCRATCHPAD_COLOR: First-run scratchpad
  - EXPORT_VERSION: Version string written to export documents
  - FLOATING_KEY / SELECTED_SCRATCHPAD_KEY: Settings keys
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Single source of truth for magic strings
"""

# Warm, friendly color palette
PALETTE = (
    "#E8A87C",  # Warm peach
    "#C38D9E",  # Dusty rose
    "#41B3A3",  # Soft teal
    "#E27D60",  # Terracotta
    "#85CDCA",  # Mint
    "#D4A574",  # Caramel
    "#A8D8EA",  # Sky blue
    "#F6D55C",  # Warm yellow
)

DEFAULT_ACCENT = "#6EA8FE"

# First-run scratchpad
DEFAULT_SCRATCHPAD_NAME = "My Tasks"
DEFAULT_SCRATCHPAD_COLOR = "#E8A87C"
NEW_SCRATCHPAD_NAME = "Untitled"

# Export document
EXPORT_VERSION = "1.0"
SUPPORTED_VERSIONS = ("1.0",)

# Settings keys
FLOATING_KEY = "TaskScratchpad.isFloating"
SELECTED_SCRATCHPAD_KEY = "TaskScratchpad.selectedScratchpad"

# Environment override for the data directory
HOME_ENV_VAR = "SCRATCHPAD_HOME"
