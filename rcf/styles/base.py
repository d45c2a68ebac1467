"""Central CSS definitions for the inline finder."""

# Inline block: sized by its content, no chrome
INLINE_CSS = """
Screen:inline {
    height: auto;
    min-height: 1;
    border: none;
    padding: 0;
    background: $background;
}
"""

BASE_CSS = INLINE_CSS
