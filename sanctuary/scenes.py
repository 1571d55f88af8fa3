from __future__ import annotations

import copy

from sanctuary.constants import DEFAULT_ROLE

SCENE_MOODS = [
    ("playful", "Playful", "😈"),
    ("romantic", "Romantic", "💕"),
    ("passionate", "Passionate", "🔥"),
    ("adventurous", "Adventurous", "⚡"),
    ("intimate", "Intimate", "🌹"),
    ("sensual", "Sensual", "✨"),
]

PREFERENCE_KEYS = ["energy", "intimacy", "adventure", "romance"]
DEFAULT_PREFERENCES = {key: 3 for key in PREFERENCE_KEYS}

FALLBACK_MOOD = "romantic"

SCENES = {
    "playful": {
        "title": "Playful Evening Adventure",
        "setting": "Cozy living room with soft lighting",
        "activities": ["Massage with flavored oils", "Playful teasing game", "Intimate conversation"],
        "duration": "1-2 hours",
        "preparation": ["Dim the lights", "Light scented candles", "Prepare massage oils"],
        "mood_music": "Soft jazz or ambient music",
        "special_touches": ["Blindfold surprise", "Feather touches", "Ice cube play"],
    },
    "romantic": {
        "title": "Romantic Candlelit Connection",
        "setting": "Bedroom transformed into romantic haven",
        "activities": ["Slow dance", "Wine tasting", "Poetry reading"],
        "duration": "2-3 hours",
        "preparation": ["Rose petals on bed", "Champagne chilled", "Soft music playlist"],
        "mood_music": "Classical or soft acoustic",
        "special_touches": ["Love letters", "Surprise gifts", "Stargazing"],
    },
    "passionate": {
        "title": "Intense Passion Session",
        "setting": "Private space with mood lighting",
        "activities": ["Passionate massage", "Deep connection", "Exploration time"],
        "duration": "1-2 hours",
        "preparation": ["Privacy ensured", "Comfortable temperature", "Hydration ready"],
        "mood_music": "Sensual R&B or electronic",
        "special_touches": ["Temperature play", "Texture exploration", "Breathwork"],
    },
}


def generate_scene(mood, preferences=None, role=None):
    """Look up the scene for ``mood``.

    Preferences and role are copied into the result for display only; they
    never change which scene is chosen.
    """
    scene = copy.deepcopy(SCENES.get(mood) or SCENES[FALLBACK_MOOD])
    echoed = dict(DEFAULT_PREFERENCES)
    echoed.update(preferences or {})
    scene["preferences"] = echoed
    scene["customized_for"] = role or DEFAULT_ROLE
    return scene
