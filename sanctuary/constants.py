APPOINTMENTS_TABLE = "appointments"
FANTASIES_TABLE = "fantasies"
MESSAGES_TABLE = "messages"
AI_CONVERSATIONS_TABLE = "ai_conversations"
STORIES_TABLE = "stories"
TOY_SESSIONS_TABLE = "toy_sessions"
PROFILES_TABLE = "profiles"
MOOD_LOGS_TABLE = "mood_logs"
USERS_TABLE = "users"

READ_COUNT_RPC = "increment_read_count"

ROLES = ["partner1", "partner2"]
DEFAULT_ROLE = "partner1"

APPOINTMENT_TYPES = [
    ("shave", "Personal Care", "✨"),
    ("massage", "Massage", "💆"),
    ("intimate", "Intimate Time", "💕"),
    ("talk", "Deep Conversation", "💬"),
    ("surprise", "Surprise", "🎁"),
]
APPOINTMENT_TYPE_LABELS = {value: f"{icon} {label}" for value, label, icon in APPOINTMENT_TYPES}

FANTASY_CATEGORIES = [
    ("romantic", "Romantic", "💕"),
    ("adventurous", "Adventurous", "🔥"),
    ("playful", "Playful", "😈"),
    ("sensual", "Sensual", "🌹"),
    ("exploration", "New Exploration", "✨"),
]
FANTASY_INTENSITY_LABELS = {
    1: "Gentle",
    2: "Moderate",
    3: "Intense",
    4: "Wild",
    5: "Extreme",
}

STORY_CATEGORIES = [
    ("romantic", "Romantic", "💕"),
    ("passionate", "Passionate", "🔥"),
    ("playful", "Playful", "😊"),
    ("sensual", "Sensual", "🌹"),
    ("adventure", "Adventure", "⚡"),
    ("fantasy", "Fantasy", "✨"),
]
STORY_INTENSITY_LABELS = {
    1: "Gentle",
    2: "Mild",
    3: "Moderate",
    4: "Intense",
    5: "Very Intense",
}

CONVERSATION_TYPES = [
    ("general", "General Chat"),
    ("relationship", "Relationship Advice"),
    ("intimacy", "Intimacy Guidance"),
    ("health", "Health & Wellness"),
    ("emotional", "Emotional Support"),
]

QUICK_PROMPTS = [
    "How can we improve our communication?",
    "What are some romantic date ideas?",
    "Help me understand my partner better",
    "Ways to show appreciation and love",
    "How to handle difficult conversations",
    "Ideas for staying connected during tough times",
]

QUICK_MESSAGES = [
    "Thinking of you ❤️",
    "Can't wait to see you",
    "You're amazing",
    "Miss you already",
    "Love you so much",
]

MOOD_FIELDS = [
    ("overall_mood", "Overall Mood"),
    ("intimacy_mood", "Intimacy Mood"),
    ("energy_level", "Energy Level"),
    ("connection_feeling", "Connection Feeling"),
]

DEFAULT_PREFERENCES = {
    "notifications": {
        "appointments": True,
        "messages": True,
        "mood_reminders": True,
    },
    "privacy": {
        "share_mood_data": True,
        "ai_learning": True,
    },
    "interface": {
        "theme": "romantic",
        "intimacy_level": "moderate",
    },
}

THEMES = [
    ("romantic", "Romantic Rose"),
    ("passion", "Passionate Purple"),
    ("warm", "Warm Amber"),
    ("nature", "Natural Green"),
]

NETWORK_ERROR_MESSAGE = (
    "Unable to connect to your private database. Please check the backend URL and key in your configuration."
)
