"""QSS stylesheet and mode colors for TakeARest."""

from __future__ import annotations

from ..timer.engine import Mode

# ── mode colors (primary, secondary) ────────────────────────────────────

MODE_COLORS: dict[Mode, tuple[str, str]] = {
    Mode.WORKING: ("#FF6B6B", "#FFA07A"),   # warm coral
    Mode.RESTING: ("#4ECDC4", "#44B09E"),   # cool teal
}
PAUSED_COLORS: tuple[str, str] = ("#6C7086", "#585B70")

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#CBA6F7",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "danger":       "#F38BA8",
    "border":       "#313154",
}


def mode_color(mode: Mode, paused: bool = False) -> str:
    return PAUSED_COLORS[0] if paused else MODE_COLORS[mode][0]


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    QMainWindow, QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 13px;
    }}
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 14px;
    }}
    QLabel#timeLabel {{
        font-size: 56px;
        font-weight: 700;
        letter-spacing: 2px;
    }}
    QLabel#modeLabel, QLabel#sectionLabel {{
        color: {p['text_muted']};
        font-size: 11px;
        font-weight: 600;
        letter-spacing: 2px;
    }}
    QPushButton {{
        background-color: {p['surface']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 7px 16px;
    }}
    QPushButton:hover {{
        border-color: {p['accent']};
    }}
    QPushButton#primary {{
        background-color: {p['accent']};
        color: {p['bg']};
        font-weight: 600;
    }}
    QListWidget, QLineEdit, QSpinBox {{
        background-color: {p['surface']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 4px;
    }}
    QProgressBar {{
        background-color: {p['surface']};
        border: none;
        border-radius: 4px;
        max-height: 8px;
    }}
    """


def overlay_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    rest = MODE_COLORS[Mode.RESTING][0]
    return f"""
    QWidget#restOverlay {{
        background-color: rgba(16, 16, 30, 235);
    }}
    QLabel#overlayTitle {{
        color: {rest};
        font-size: 28px;
        font-weight: 700;
    }}
    QLabel#overlayTime {{
        color: {p['text']};
        font-size: 96px;
        font-weight: 700;
    }}
    QPushButton {{
        background-color: {p['surface']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 22px;
        font-size: 15px;
    }}
    QPushButton:hover {{
        border-color: {rest};
    }}
    """
