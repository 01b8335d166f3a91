from enum import Enum


class PromptStatus(str, Enum):
    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"
