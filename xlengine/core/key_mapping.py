# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Comma-delimited key lists used by the action/key mapping sections.

A mapping line looks like ``Jump=Space,Enter``.  The value is split on
commas into an ordered list of key identifiers.  Two escapes let a key
identifier contain a comma:

* ``\\,`` and ``\\\\`` - a backslash makes the next comma or backslash
  literal.  This is what :func:`format_keys` writes.
* ``,,`` - a comma immediately followed by another comma is literal.  Older
  settings files use this form, so the parser still accepts it.
"""

from __future__ import annotations

import logging

log = logging.getLogger(__name__)

MAX_MAPPING_COUNT = 8     # keys bound to a single action
MAX_KEY_LENGTH    = 255   # characters in one key identifier

_TERMINATORS = "\r\n\x00"
_ESCAPE = "\\"
_SEPARATOR = ","


def parse_keys(
    raw: str,
    *,
    max_keys: int = MAX_MAPPING_COUNT,
    max_length: int = MAX_KEY_LENGTH,
) -> list[str]:
    """Split *raw* into key identifiers.

    Scanning stops at the first CR, LF or NUL.  The last token is always
    emitted, even when empty, so ``""`` parses to ``[""]`` and ``"A,"`` to
    ``["A", ""]``.  Over-long keys and over-long lists are clamped to
    *max_length* / *max_keys* and reported.
    """
    tokens: list[str] = []
    current: list[str] = []

    i = 0
    n = len(raw)
    while i < n:
        ch = raw[i]
        if ch in _TERMINATORS:
            break
        nxt = raw[i + 1] if i + 1 < n else ""
        if ch == _ESCAPE and nxt in (_ESCAPE, _SEPARATOR):
            current.append(nxt)
            i += 2
            continue
        if ch == _SEPARATOR and nxt != _SEPARATOR:
            tokens.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    tokens.append("".join(current))

    for idx, token in enumerate(tokens):
        if len(token) > max_length:
            log.error(
                "Key %r is longer than %d characters; truncating",
                token, max_length,
            )
            tokens[idx] = token[:max_length]

    if len(tokens) > max_keys:
        log.error(
            "Key list %r has %d entries, only %d are kept",
            raw, len(tokens), max_keys,
        )
        del tokens[max_keys:]

    return tokens


def format_keys(keys: list[str]) -> str:
    """Join *keys* into the text form read by :func:`parse_keys`."""
    return _SEPARATOR.join(_escape(k) for k in keys)


def _escape(key: str) -> str:
    return (
        key.replace(_ESCAPE, _ESCAPE * 2)
           .replace(_SEPARATOR, _ESCAPE + _SEPARATOR)
    )
