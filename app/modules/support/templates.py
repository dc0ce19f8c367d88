"""
Canned supportive messages.

Template choice is a plain lookup: the feeling word (lower-cased) is matched
against a keyword table, then the feeling color, then the default.
"""

from typing import Dict, Optional, Tuple
from urllib.parse import quote

DEFAULT_TEMPLATE = "default"

TEMPLATES: Dict[str, str] = {
    "sad": "Hey {name}, saw you're feeling {word} today. I'm here if you want to talk 💛",
    "tired": "{name}, sounds like a {word} day. Be easy on yourself, you've earned a rest. - {sender}",
    "anxious": "Hi {name}, feeling {word} is rough. Want to grab a coffee or just vent? - {sender}",
    "angry": "{name}, {word} days happen. Want to tell me what's going on? - {sender}",
    "lonely": "Thinking of you, {name}. You're not alone, call me anytime 📞 - {sender}",
    "sick": "Feel better soon, {name}! Need me to drop anything off? - {sender}",
    "happy": "Love seeing you {word}, {name}! What's the good news? - {sender}",
    "proud": "{name}, you should feel {word}! So happy for you 🎉 - {sender}",
    "invite": "{sender} invited you to share your colors in {group}. Join here: {link}",
    DEFAULT_TEMPLATE: "Hey {name}, just checking in on you. Saw you're feeling {word} today 🌈 - {sender}",
}

# Word -> template key. Synonyms share a template.
KEYWORDS: Dict[str, str] = {
    "sad": "sad",
    "down": "sad",
    "blue": "sad",
    "heartbroken": "sad",
    "tired": "tired",
    "exhausted": "tired",
    "drained": "tired",
    "sleepy": "tired",
    "burnt": "tired",
    "anxious": "anxious",
    "stressed": "anxious",
    "nervous": "anxious",
    "worried": "anxious",
    "overwhelmed": "anxious",
    "angry": "angry",
    "mad": "angry",
    "frustrated": "angry",
    "annoyed": "angry",
    "lonely": "lonely",
    "alone": "lonely",
    "isolated": "lonely",
    "sick": "sick",
    "ill": "sick",
    "unwell": "sick",
    "happy": "happy",
    "excited": "happy",
    "great": "happy",
    "joyful": "happy",
    "grateful": "happy",
    "proud": "proud",
    "accomplished": "proud",
}

# Fallback when the word is unknown
COLOR_TEMPLATES: Dict[str, str] = {
    "red": "angry",
    "blue": "sad",
    "gray": "tired",
    "purple": "anxious",
    "yellow": "happy",
    "green": "happy",
    "orange": "happy",
    "pink": "happy",
}


def select_template(word: Optional[str], color: Optional[str] = None) -> Tuple[str, str]:
    """Return (template_key, template_text) for a feeling."""
    key = KEYWORDS.get((word or "").strip().lower())
    if key is None and color:
        key = COLOR_TEMPLATES.get(color.lower())
    key = key or DEFAULT_TEMPLATE
    return key, TEMPLATES[key]


def render_message(template: str, **values: str) -> str:
    """Fill {placeholders}; unknown placeholders are rendered empty."""
    class _Blank(dict):
        def __missing__(self, key):
            return ""

    text = template.format_map(_Blank({k: v for k, v in values.items() if v is not None}))
    return " ".join(text.split())


def build_sms_uri(phone: str, body: str) -> str:
    """sms: link that opens the native messaging app with the body prefilled."""
    return f"sms:{phone}?&body={quote(body, safe='')}"
