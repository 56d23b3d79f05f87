from __future__ import annotations

from invoicer.styles.tokens import Colors, Radius, Space


def light_qss() -> str:
    c = Colors
    r = Radius
    s = Space
    return f"""
    QWidget {{ font-size: 13px; background: {c.bg}; color: {c.text}; }}
    QMainWindow>QWidget {{ background: {c.bg}; }}
    QFrame#Card {{ border: 1px solid {c.border}; border-radius: {r.md}px; background: {c.card}; }}
    QFrame#CardRow {{ border:1px solid {c.border}; border-radius:{r.md}px; background:{c.card}; padding:{s.xs}px; }}
    QLabel#SectionTitle {{ font-size: 14px; font-weight: 700; color: {c.subtext}; padding: 2px 2px 0 2px; }}
    QLabel#TotalValue {{ font-size: 15px; font-weight: 700; color: {c.accent}; }}
    QLineEdit, QTextEdit, QSpinBox, QDoubleSpinBox {{
        border: 1px solid {c.input_border}; border-radius: {r.sm}px; padding: {s.xs}px; background: {c.card};
    }}
    QLineEdit:focus, QTextEdit:focus, QSpinBox:focus, QDoubleSpinBox:focus {{ border: 1px solid {c.accent}; }}
    QPushButton {{ padding: 8px 16px; border-radius: {r.sm}px; border: 1px solid {c.border}; background: {c.card}; }}
    QPushButton:hover {{ background: {c.accent_soft}; }}
    QPushButton#Primary {{ background: {c.accent}; color: white; border: none; font-weight: 600; }}
    QPushButton#Primary:hover {{ background: {c.accent_hover}; }}
    QPushButton#Primary:disabled {{ background: {c.input_border}; color: {c.card}; }}
    QPushButton#RemoveRow {{ color: {c.danger}; padding: 4px; }}
    """
