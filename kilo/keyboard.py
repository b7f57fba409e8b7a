"""Keyboard input decoding from raw terminal bytes."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import EditorConstants

logger = logging.getLogger(__name__)

ESC = 0x1B


class KeyType(Enum):
    """Types of key events."""
    NOTHING = "nothing"
    ARROW_UP = "arrow_up"
    ARROW_DOWN = "arrow_down"
    ARROW_LEFT = "arrow_left"
    ARROW_RIGHT = "arrow_right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    DELETE = "delete"
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESCAPE = "escape"
    TAB = "tab"
    CHARACTER = "character"


def ctrl(letter: str) -> str:
    """Return the control character produced by Ctrl+letter."""
    return chr(ord(letter) & 0x1F)


def is_ctrl(ch: str) -> bool:
    return 0x00 <= ord(ch) <= 0x1F


@dataclass(frozen=True)
class KeyEvent:
    """Represents a decoded keyboard event."""
    key_type: KeyType
    value: str = ""  # The character for CHARACTER events
    raw: bytes = b""  # The bytes consumed from the terminal

    @property
    def is_ctrl(self) -> bool:
        return self.key_type == KeyType.CHARACTER and is_ctrl(self.value)

    def is_ctrl_key(self, letter: str) -> bool:
        """True if this is the Ctrl+letter character."""
        return self.key_type == KeyType.CHARACTER and self.value == ctrl(letter)


NOTHING = KeyEvent(KeyType.NOTHING)

# ESC [ <letter>
CSI_LETTER_KEYS = {
    "A": KeyType.ARROW_UP,
    "B": KeyType.ARROW_DOWN,
    "C": KeyType.ARROW_RIGHT,
    "D": KeyType.ARROW_LEFT,
    "H": KeyType.HOME,
    "F": KeyType.END,
}

# ESC [ <digit> ~
CSI_TILDE_KEYS = {
    "1": KeyType.HOME,
    "3": KeyType.DELETE,
    "4": KeyType.END,
    "5": KeyType.PAGE_UP,
    "6": KeyType.PAGE_DOWN,
    "7": KeyType.HOME,
    "8": KeyType.END,
}

# ESC O <letter>
SS3_KEYS = {
    "H": KeyType.HOME,
    "F": KeyType.END,
}

SINGLE_BYTE_KEYS = {
    ord("\r"): KeyType.ENTER,
    0x7F: KeyType.BACKSPACE,
    ord("\t"): KeyType.TAB,
}


class KeyboardHandler:
    """Turns the terminal's byte stream into KeyEvents.

    Escape sequences are decoded with a bounded lookahead: after an ESC
    byte at most three more bytes are read, each within the escape
    timeout. If the sequence is cut short or not recognised the event is
    a plain ESCAPE, so a lone ESC keypress never blocks.
    """

    def __init__(self, terminal_interface,
                 escape_timeout: float = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface
        self.escape_timeout = escape_timeout

    def get_key_event(self, timeout: Optional[float] = EditorConstants.READ_TIMEOUT) -> KeyEvent:
        """Read one logical key.

        Returns NOTHING when no byte arrives within the timeout or the
        input has ended.
        """
        byte = self.terminal.read_byte(timeout)
        if byte is None:
            return NOTHING
        if byte == ESC:
            return self._read_escape_sequence()
        return self.parse_byte(byte)

    def parse_byte(self, byte: int) -> KeyEvent:
        """Map a single byte outside an escape sequence to a KeyEvent."""
        raw = bytes([byte])
        key_type = SINGLE_BYTE_KEYS.get(byte)
        if key_type is not None:
            return KeyEvent(key_type, raw=raw)
        # Bytes >= 0x80 become lone surrogates so they survive a save untouched
        return KeyEvent(KeyType.CHARACTER, value=raw.decode("utf-8", "surrogateescape"), raw=raw)

    def _read_escape_sequence(self) -> KeyEvent:
        seq = bytearray([ESC])

        def escape():
            return KeyEvent(KeyType.ESCAPE, raw=bytes(seq))

        for _ in range(2):
            byte = self.terminal.read_byte(self.escape_timeout)
            if byte is None:
                return escape()
            seq.append(byte)

        introducer, code = chr(seq[1]), chr(seq[2])
        if introducer == "[":
            if code in CSI_LETTER_KEYS:
                return KeyEvent(CSI_LETTER_KEYS[code], raw=bytes(seq))
            if "0" <= code <= "9":
                byte = self.terminal.read_byte(self.escape_timeout)
                if byte is None:
                    return escape()
                seq.append(byte)
                if chr(byte) == "~" and code in CSI_TILDE_KEYS:
                    return KeyEvent(CSI_TILDE_KEYS[code], raw=bytes(seq))
        elif introducer == "O" and code in SS3_KEYS:
            return KeyEvent(SS3_KEYS[code], raw=bytes(seq))

        logger.debug("Unrecognised escape sequence %r", bytes(seq))
        return escape()
