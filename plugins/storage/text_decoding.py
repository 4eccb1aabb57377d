"""Decoding of downloaded blob content into text."""

import codecs
from enum import Enum
from typing import Optional

ASCII_REPLACE_ERRORS = "ascii_question_mark"


def _replace_with_question_mark(error: UnicodeDecodeError):
    return "?" * (error.end - error.start), error.end


codecs.register_error(ASCII_REPLACE_ERRORS, _replace_with_question_mark)


class EncodingSelector(Enum):
    UTF8 = "utf-8"
    ASCII = "ascii"

    @property
    def codec(self) -> str:
        return self.value

    @property
    def errors(self) -> str:
        """Error handler for undecodable bytes: "?" per byte for ASCII, U+FFFD for UTF-8."""
        return ASCII_REPLACE_ERRORS if self is EncodingSelector.ASCII else "replace"

    @classmethod
    def parse(cls, name: Optional[str]) -> "EncodingSelector":
        """Map a case-insensitive encoding name; None or unknown names mean UTF-8."""
        if name is not None and name.lower() == "ascii":
            return cls.ASCII
        return cls.UTF8


def decode_blob_text(data: bytes, encoding: Optional[str] = "utf8") -> str:
    """Decode blob bytes, substituting invalid sequences instead of failing."""
    selector = EncodingSelector.parse(encoding)
    return data.decode(selector.codec, errors=selector.errors)
