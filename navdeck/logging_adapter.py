"""Log records for the navdeck bus streams.

Whatever is pushed into ``log``/``warn``/``debug`` (a string, a dict such as
a tab notice record, or an exception) is turned into one record dict and
written to the ``navdeck`` logger as a single line::

    [2024-05-01 10:00:00][WARNING][navdeck.tabs] nothing to close | {"kind":"nothing_to_close"}

The minimum level comes from ``config.get('log.level')``, so both
``NAVDECK_LOG_LEVEL`` and ``config.set('log.level', ...)`` apply.
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, Dict

from .config import config

__all__ = [
    'current_level_name', 'level_value', 'should_emit_level',
    'normalize_record', 'format_line', 'NavdeckFormatter', 'setup_navdeck_logging',
]

_HANDLER_MARK = '_navdeck_bus_handler'
_RESERVED = ('ts', 'level', 'source', 'message')


def _now(timestamp=None) -> str:
    moment = datetime.datetime.fromtimestamp(timestamp) if timestamp else datetime.datetime.now()
    return moment.isoformat(sep=' ', timespec='seconds')


def current_level_name() -> str:
    return str(config.get('log.level') or 'INFO').upper()


def level_value(name: Any) -> int:
    """Numeric value of a level name; unknown names count as INFO."""
    value = logging.getLevelName(str(name).upper())
    return value if isinstance(value, int) else logging.INFO


def should_emit_level(level_name: str) -> bool:
    return level_value(level_name) >= level_value(current_level_name())


def normalize_record(x: Any, *, default_level='INFO', default_source='navdeck') -> Dict[str, Any]:
    record = {
        'ts': _now(),
        'level': str(default_level).upper(),
        'source': default_source,
        'message': str(x),
        'extra': {},
    }
    if isinstance(x, dict):
        record.update(
            ts=x.get('ts') or record['ts'],
            level=str(x.get('level', default_level)).upper(),
            source=str(x.get('source', default_source)),
            message=str(x.get('message', x)),
            extra={k: v for k, v in x.items() if k not in _RESERVED},
        )
    elif isinstance(x, BaseException):
        record.update(level='ERROR', message=f'{type(x).__name__}: {x}')
    return record


def format_line(record: Dict[str, Any]) -> str:
    line = '[{ts}][{level}][{source}] {message}'.format(**record)
    extra = record.get('extra')
    if extra:
        line += ' | ' + json.dumps(extra, ensure_ascii=False, default=str, separators=(',', ':'))
    return line


class NavdeckFormatter(logging.Formatter):
    """Render a LogRecord through ``format_line``.

    Records written by the bus carry ``navdeck_source`` and ``navdeck_extra``;
    plain ``logging`` calls from navdeck modules fall back to the logger name.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = format_line({
            'ts': _now(record.created),
            'level': record.levelname,
            'source': getattr(record, 'navdeck_source', None) or record.name,
            'message': record.getMessage(),
            'extra': getattr(record, 'navdeck_extra', None),
        })
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_navdeck_logging() -> logging.Logger:
    """Attach the navdeck handler once and apply the configured level."""
    logger = logging.getLogger('navdeck')
    if not any(getattr(h, _HANDLER_MARK, False) for h in logger.handlers):
        handler = logging.StreamHandler()
        setattr(handler, _HANDLER_MARK, True)
        handler.setFormatter(NavdeckFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(level_value(current_level_name()))
    return logger
