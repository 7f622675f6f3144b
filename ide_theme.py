"""
Viewer Theme: shared color palette and keyword lists for the trace viewer.
"""

# ── Theme Colors  (Catppuccin Mocha) ──
COLORS = {
    "bg":           "#1e1e2e",
    "bg_secondary": "#181825",
    "bg_tertiary":  "#11111b",
    "surface":      "#313244",
    "overlay":      "#45475a",
    "text":         "#cdd6f4",
    "subtext":      "#a6adc8",
    "green":        "#a6e3a1",
    "yellow":       "#f9e2af",
    "mauve":        "#cba6f7",
    "peach":        "#fab387",
    "line_num_fg":  "#585b70",
    "selection":    "#45475a",
    "output_bg":    "#11111b",
    "toolbar_bg":   "#181825",
    "accent":       "#89b4fa",
    "button_bg":    "#313244",
    "button_hover": "#45475a",
    "current_line": "#3b3f5c",
    "executed_line": "#232336",
}

# ── Keyword Lists for Highlighting ──
KEYWORDS_CONTROL = {'IF', 'THEN', 'ELSEIF', 'ELSE', 'ENDIF', 'WHILE', 'ENDWHILE'}
KEYWORDS_IO = {'PRINT'}
KEYWORDS_OP = {'AND', 'OR', 'NOT', 'true', 'false'}
