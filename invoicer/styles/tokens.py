from __future__ import annotations

"""Design tokens for the Invoicer UI.

- Accent matches the purple used on the generated PDF.
- Spacing scale uses 4px multiples.
"""


class Colors:
    bg = "#f7f5fa"
    card = "#ffffff"
    text = "#222"
    subtext = "#555"
    border = "#e3dced"
    input_border = "#cfc6da"
    accent = "#733399"  # rgb(0.45, 0.20, 0.60)
    accent_hover = "#5f2a80"
    accent_soft = "#f1eaf7"
    danger = "#b3261e"


class Radius:
    sm = 6
    md = 10


class Space:
    xs = 4
    sm = 8
    md = 12
    lg = 16
