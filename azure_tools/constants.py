from enum import Enum


class Ecosystem(Enum):
    MICROSOFT = "microsoft"
    GENERAL = "general"

    def __str__(self) -> str:
        return self.value
