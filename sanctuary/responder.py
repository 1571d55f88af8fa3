"""Canned companion replies.

Replies are drawn from fixed per-category lists; nothing here calls a model.
"""
from __future__ import annotations

import random

RESPONSES = {
    "general": [
        "I understand you're looking for guidance. Communication and understanding are the foundation of any "
        "strong relationship. What specific aspect would you like to explore further?",
        "Every relationship is unique, and it's wonderful that you're seeking to understand and grow together. "
        "Tell me more about what's on your mind.",
        "Building a strong connection takes time, patience, and mutual respect. I'm here to help you navigate "
        "this journey.",
    ],
    "relationship": [
        "Healthy relationships are built on trust, communication, and mutual respect. What challenges are you "
        "facing that I can help you work through?",
        "Remember that every relationship goes through ups and downs. The key is maintaining open dialogue and "
        "showing empathy for each other's perspectives.",
        "Love languages, quality time, and understanding each other's needs are crucial. Which area would you "
        "like to focus on?",
    ],
    "intimacy": [
        "Intimacy is about emotional and physical connection built on trust and communication. What aspects of "
        "intimacy would you like to explore together?",
        "Creating safe spaces for vulnerability and open conversation is essential for intimate connections. "
        "How can I help you build that foundation?",
        "Physical and emotional intimacy grow together through patience, understanding, and mutual exploration. "
        "What questions do you have?",
    ],
    "health": [
        "Your physical and emotional well-being directly impact your relationship. Self-care isn't selfish; "
        "it's necessary for being your best self with your partner.",
        "Health challenges can be difficult, but facing them together can strengthen your bond. What support "
        "do you need right now?",
        "Maintaining both individual and couple wellness is important. How can you support each other's health "
        "goals?",
    ],
    "emotional": [
        "Your feelings are valid, and it's important to acknowledge them. Emotional support in relationships "
        "means being present and understanding.",
        "Processing emotions together can deepen your connection. What emotions are you working through that I "
        "can help you understand?",
        "Emotional intimacy requires vulnerability and trust. I'm here to provide guidance as you navigate "
        "these feelings.",
    ],
}

DEFAULT_CATEGORY = "general"

HEALTH_KEYWORDS = ("cancer", "illness")
HEALTH_SUFFIX = (
    "I understand you're dealing with health challenges, which can add complexity to relationships. Remember "
    "that love, support, and being present for each other are the most powerful tools you have. What specific "
    "support do you need right now?"
)

COMMUNICATION_KEYWORDS = ("communicate", "talk")
COMMUNICATION_SUFFIX = (
    "Communication is the bridge between hearts and minds. Try setting aside dedicated time for conversations "
    "without distractions, using \"I feel\" statements, and actively listening to understand rather than respond."
)

KEYWORD_SUFFIXES = [
    (HEALTH_KEYWORDS, HEALTH_SUFFIX),
    (COMMUNICATION_KEYWORDS, COMMUNICATION_SUFFIX),
]


def responses_for(category):
    return RESPONSES.get(category) or RESPONSES[DEFAULT_CATEGORY]


def generate_response(message, category, rng=None):
    rng = rng or random.Random()
    base = rng.choice(responses_for(category))
    lowered = str(message or "").lower()
    # First matching keyword group wins.
    for keywords, suffix in KEYWORD_SUFFIXES:
        if any(keyword in lowered for keyword in keywords):
            return f"{base} {suffix}"
    return base
