from enum import Enum
from typing import Dict, List


class FeelingColor(str, Enum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    GRAY = "gray"


COLOR_HEX: Dict[FeelingColor, str] = {
    FeelingColor.RED: "#E5484D",
    FeelingColor.ORANGE: "#F76B15",
    FeelingColor.YELLOW: "#FFC53D",
    FeelingColor.GREEN: "#46A758",
    FeelingColor.BLUE: "#0090FF",
    FeelingColor.PURPLE: "#8E4EC6",
    FeelingColor.PINK: "#D6409F",
    FeelingColor.GRAY: "#8B8D98",
}

SUGGESTED_WORDS: Dict[FeelingColor, List[str]] = {
    FeelingColor.RED: ["angry", "frustrated", "fired-up", "passionate"],
    FeelingColor.ORANGE: ["energized", "restless", "playful", "busy"],
    FeelingColor.YELLOW: ["happy", "sunny", "excited", "grateful"],
    FeelingColor.GREEN: ["calm", "balanced", "hopeful", "fresh"],
    FeelingColor.BLUE: ["sad", "down", "reflective", "quiet"],
    FeelingColor.PURPLE: ["anxious", "stressed", "creative", "dreamy"],
    FeelingColor.PINK: ["loved", "cozy", "sweet", "proud"],
    FeelingColor.GRAY: ["tired", "meh", "numb", "sick"],
}

EMPTY_HEX = "#E0E1E6"


def color_hex(color) -> str:
    try:
        return COLOR_HEX[FeelingColor(color)]
    except ValueError:
        return EMPTY_HEX


def palette() -> List[dict]:
    return [
        {"color": c.value, "hex": COLOR_HEX[c], "words": SUGGESTED_WORDS[c]}
        for c in FeelingColor
    ]
