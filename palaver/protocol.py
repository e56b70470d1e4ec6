"""
Wire protocol for the chat service.

Newline-delimited UTF-8 text, one implicit global room.
"""

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 8888

QUIT_COMMAND = "/quit"
GUEST_PREFIX = "Guest"

WELCOME = "Welcome to the chat! Please enter your nickname:"
GOODBYE = "Goodbye!"


def greeting(nickname):
    return f"Hello {nickname}! Type {QUIT_COMMAND} to exit."


def joined(nickname):
    return f"** {nickname} joined the chat **"


def left(nickname):
    return f"** {nickname} left the chat **"


def chat_line(nickname, text):
    """Decorate a client line for broadcast; `text` is sent as received."""
    return f"[{nickname}] {text}"


def is_quit(line):
    return line.strip().lower() == QUIT_COMMAND


def normalize_nickname(raw):
    """Return the trimmed nickname, or None if nothing usable was supplied."""
    if raw is None:
        return None
    name = raw.strip()
    return name or None


def encode_line(text):
    return text.encode('utf-8') + b'\n'


def decode_line(data):
    """
    Decode one raw line as read from the stream.

    Strips the terminating newline (and a preceding carriage return) but
    keeps everything else, leading and trailing spaces included.
    """
    text = data.decode('utf-8', errors='replace')
    if text.endswith('\n'):
        text = text[:-1]
        if text.endswith('\r'):
            text = text[:-1]
    return text
