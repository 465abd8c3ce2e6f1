"""
VirtuoHub Theme - Centralized color palette.

Violet accent for primary actions, teal for success, red for failures,
tinted grays for text hierarchy.
"""

# =============================================================================
# PRIMARY ACCENT COLORS
# =============================================================================
VIOLET_PRIMARY = "#8B5CF6"     # Main accent, primary buttons
TEAL_PRIMARY = "#4ECDC4"       # Success
RED_PRIMARY = "#FF6B6B"        # Errors

# =============================================================================
# TEXT COLORS
# =============================================================================
TEXT_BRIGHT = "#E4E4F0"
TEXT_MUTED = "#8A8FA8"

# =============================================================================
# BACKGROUND COLORS
# =============================================================================
BG_HEADER = "#0e0b1f"
BG_GRADIENT_START = "#140f2b"
BG_GRADIENT_END = "#07060f"
CARD_BG = "rgba(255,255,255,0.04)"
BORDER_DIVIDER = "rgba(255,255,255,0.12)"

# =============================================================================
# SEMANTIC UI TOKENS
# =============================================================================
TEXT_TITLE = TEXT_BRIGHT
ERROR_TEXT = RED_PRIMARY
VOTE_SELECTED = VIOLET_PRIMARY

TOAST_DEFAULT = "#2A2540"
TOAST_SUCCESS = "#1F4D49"
TOAST_DESTRUCTIVE = "#5C1F24"


def get_toast_color(variant: str) -> str:
    """Background color for a toast variant."""
    colors = {
        "success": TOAST_SUCCESS,
        "destructive": TOAST_DESTRUCTIVE,
    }
    return colors.get(variant, TOAST_DEFAULT)
