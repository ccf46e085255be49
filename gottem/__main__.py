"""Gottem CLI entry point.

Allows running via `python -m gottem` and provides the console script
defined in `pyproject.toml`.

Usage:
    gottem [conversation_id]
    gottem --version
    gottem --keytest
"""

from __future__ import annotations

import sys

from .constants import EditorConstants
from .version import get_version_string

USAGE = "usage: gottem [--version | --keytest | conversation_id]"


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Print parsed key events until Esc, using the editor's input stack."""
    from .keyboard import KeyType
    from .terminal import BlessedScreen

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    screen = BlessedScreen()
    screen.setup()
    lines = []
    try:
        while True:
            ev = screen.keyboard.get_key_event(timeout=None)
            if ev is None:
                # Input without a timeout only comes back empty when there is no tty
                break
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                break
            parts = [f"type={ev.key_type.value}", f"value={ev.value!r}",
                     f"raw='{_escape_bytes(ev.raw)}'"]
            flags = [name for name, on in (('alt', ev.is_alt), ('ctrl', ev.is_ctrl),
                                           ('shift', ev.is_shift)) if on]
            if flags:
                parts.append(f"flags={'+'.join(flags)}")
            lines.append(' '.join(parts))
            print(screen.term.move(len(lines) % max(screen.term.height, 1), 0)
                  + screen.term.clear_eol + lines[-1], end='', flush=True)
    finally:
        screen.close()
    print('\n'.join(lines))
    print("Exiting keyboard test.")


def _parse_conversation_id(arg: str) -> int:
    try:
        conversation_id = int(arg)
    except ValueError:
        raise SystemExit(f"{USAGE}\ngottem: conversation id must be an integer, got {arg!r}")
    if conversation_id < 0:
        raise SystemExit(f"{USAGE}\ngottem: conversation id must not be negative")
    return conversation_id


def main() -> None:
    # Very small arg parsing: version, keyboard test mode and an optional conversation id
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] in ('--keytest', '--keyboard-test'):
        run_keyboard_test()
        return
    if args and args[0] in ('-h', '--help'):
        print(USAGE)
        return
    if len(args) > 1:
        raise SystemExit(USAGE)
    conversation_id = (_parse_conversation_id(args[0]) if args
                       else EditorConstants.DEFAULT_CONVERSATION_ID)

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    from .errors import SettingsError
    from .logging_config import setup_logging
    from .persistence import FileContextStore
    from .query import QueryRouter, echo_handler
    from .settings import load_settings
    from .terminal import BlessedScreen

    try:
        settings = load_settings()
    except SettingsError as e:
        raise SystemExit(f"gottem: invalid settings: {e}")
    logger = setup_logging(settings)

    router = QueryRouter({p.shortcut: echo_handler(p.name) for p in settings.providers})
    screen = BlessedScreen()
    editor = Editor(screen, router, FileContextStore(), settings=settings,
                    conversation_id=conversation_id, logger=logger)

    screen.setup()
    try:
        editor.run()
    finally:
        screen.close()

    if editor.last_save_error is not None:
        print(f"gottem: {EditorConstants.SAVE_FAILED_MESSAGE.format(editor.last_save_error)}",
              file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
