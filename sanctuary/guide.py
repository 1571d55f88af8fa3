from __future__ import annotations

GUIDE_CATEGORIES = [
    ("intimate", "Intimate", "💕"),
    ("playful", "Playful", "😊"),
    ("adventurous", "Adventurous", "🔥"),
    ("romantic", "Romantic", "🌹"),
    ("sensual", "Sensual", "✨"),
]

DIFFICULTY_LABELS = {
    1: "Beginner",
    2: "Easy",
    3: "Moderate",
    4: "Advanced",
    5: "Expert",
}

GUIDE_ENTRIES = [
    {
        "id": "1",
        "name": "Loving Embrace",
        "category": "intimate",
        "difficulty": 1,
        "description": "A gentle, face-to-face position that emphasizes emotional connection and intimacy.",
        "benefits": ["Deep emotional connection", "Eye contact", "Gentle pace", "Perfect for beginners"],
        "tips": ["Take your time", "Focus on breathing together", "Maintain eye contact", "Communicate throughout"],
        "image_url": "https://images.pexels.com/photos/3771115/pexels-photo-3771115.jpeg",
        "is_favorite": False,
    },
    {
        "id": "2",
        "name": "Romantic Connection",
        "category": "romantic",
        "difficulty": 2,
        "description": "A classic position that allows for tender kisses and whispered sweet words.",
        "benefits": ["Romantic atmosphere", "Close physical contact", "Intimate conversation", "Emotional bonding"],
        "tips": ["Create romantic ambiance", "Focus on sensation", "Communicate desires", "Take breaks for kissing"],
        "image_url": "https://images.pexels.com/photos/1034473/pexels-photo-1034473.jpeg",
        "is_favorite": True,
    },
    {
        "id": "3",
        "name": "Playful Adventure",
        "category": "playful",
        "difficulty": 3,
        "description": "An exciting position that brings fun and spontaneity to your intimate moments.",
        "benefits": ["Increases excitement", "Adds variety", "Builds anticipation", "Enhances pleasure"],
        "tips": ["Start slowly", "Use pillows for comfort", "Stay hydrated", "Focus on enjoyment"],
        "image_url": "https://images.pexels.com/photos/3771135/pexels-photo-3771135.jpeg",
        "is_favorite": False,
    },
]


def guide_entries():
    return [dict(entry) for entry in GUIDE_ENTRIES]


def filter_guide(entries, search="", category="all", difficulty="all"):
    term = str(search or "").strip().lower()
    result = []
    for entry in entries:
        if term and term not in entry["name"].lower() and term not in entry["description"].lower():
            continue
        if category != "all" and entry["category"] != category:
            continue
        if difficulty != "all" and str(entry["difficulty"]) != str(difficulty):
            continue
        result.append(entry)
    return result


def toggle_guide_favorite(entries, entry_id):
    return [
        {**entry, "is_favorite": not entry["is_favorite"]} if entry["id"] == entry_id else entry
        for entry in entries
    ]
