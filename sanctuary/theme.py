import streamlit as st

THEME_PRESETS = {
    "romantic": {
        "bg_main": "#fdf2f4",
        "bg_glow": "#fbe3e8",
        "bg_card": "rgba(255, 255, 255, 0.72)",
        "border": "#f3c4cf",
        "text_main": "#2f2a2c",
        "text_soft": "#7a6a6f",
        "accent": "#e11d48",
        "accent_soft": "#fecdd3",
        "plot_grid": "#f6d5dc",
    },
    "passion": {
        "bg_main": "#f6f2fd",
        "bg_glow": "#e9e0fb",
        "bg_card": "rgba(255, 255, 255, 0.72)",
        "border": "#d4c4f3",
        "text_main": "#2b2833",
        "text_soft": "#6f6880",
        "accent": "#7c3aed",
        "accent_soft": "#ddd6fe",
        "plot_grid": "#e2d8f7",
    },
    "warm": {
        "bg_main": "#fdf8f0",
        "bg_glow": "#fcebd0",
        "bg_card": "rgba(255, 255, 255, 0.72)",
        "border": "#f2d4a4",
        "text_main": "#33291c",
        "text_soft": "#7d6a52",
        "accent": "#d97706",
        "accent_soft": "#fde68a",
        "plot_grid": "#f4e2c2",
    },
    "nature": {
        "bg_main": "#f1f9f4",
        "bg_glow": "#d9f2e3",
        "bg_card": "rgba(255, 255, 255, 0.72)",
        "border": "#b7e2c8",
        "text_main": "#1f2d25",
        "text_soft": "#5b7264",
        "accent": "#059669",
        "accent_soft": "#a7f3d0",
        "plot_grid": "#cfeadb",
    },
}
DEFAULT_THEME = "romantic"


def ensure_theme_state():
    if "ui_theme" not in st.session_state:
        st.session_state["ui_theme"] = DEFAULT_THEME
    if st.session_state["ui_theme"] not in THEME_PRESETS:
        st.session_state["ui_theme"] = DEFAULT_THEME
    return st.session_state["ui_theme"]


def set_theme(name):
    st.session_state["ui_theme"] = name if name in THEME_PRESETS else DEFAULT_THEME


def get_active_theme():
    name = ensure_theme_state()
    return name, THEME_PRESETS[name]


def inject_theme_css():
    _, theme = get_active_theme()
    theme_vars_css = f"""
:root {{
    --bg-main: {theme['bg_main']};
    --bg-glow: {theme['bg_glow']};
    --bg-card: {theme['bg_card']};
    --border: {theme['border']};
    --text-main: {theme['text_main']};
    --text-soft: {theme['text_soft']};
    --accent: {theme['accent']};
    --accent-soft: {theme['accent_soft']};
}}
"""
    st.markdown(
        """
<style>
@import url('https://fonts.googleapis.com/css2?family=Crimson+Text:wght@400;600&family=IBM+Plex+Sans:wght@300;400;500&display=swap');
"""
        + theme_vars_css
        + """
html, body, [class*="css"] {
    font-family: 'IBM Plex Sans', sans-serif;
    color: var(--text-main);
}

h1, h2, h3, .page-title {
    font-family: 'Crimson Text', serif;
    letter-spacing: 0.4px;
}

.stApp {
    background: radial-gradient(1400px 900px at 20% 0%, var(--bg-glow) 0%, var(--bg-main) 58%);
    color: var(--text-main);
}

.section-title {
    font-family: 'Crimson Text', serif;
    font-size: 26px;
    font-weight: 600;
    margin: 0 0 10px 0;
}

.card {
    background: var(--bg-card);
    border: 1px solid var(--border);
    border-radius: 16px;
    padding: 16px 18px;
    margin-bottom: 14px;
}

.small-label {
    color: var(--text-soft);
    font-size: 12px;
    letter-spacing: 0.2px;
}

.chat-bubble {
    border-radius: 16px;
    padding: 10px 14px;
    margin: 4px 0;
    max-width: 75%;
    border: 1px solid var(--border);
    background: var(--bg-card);
}

.chat-bubble.own {
    margin-left: auto;
    background: var(--accent-soft);
}

.tag-pill {
    display: inline-block;
    font-size: 11px;
    padding: 2px 8px;
    margin: 0 4px 4px 0;
    border-radius: 999px;
    background: var(--accent-soft);
    color: var(--text-main);
}

.stButton>button[kind="primary"] {
    background: var(--accent) !important;
    border-color: var(--accent) !important;
}
</style>
""",
        unsafe_allow_html=True,
    )
    return theme
