"""公共日志流.

所有导航会话共享的命名流, 统一格式后写入 ``navdeck`` logger::

    'tab opened' >> log
    {'level': 'WARNING', 'message': 'nothing to close'} >> warn
"""
import logging

from .logging_adapter import (
    normalize_record, setup_navdeck_logging, should_emit_level,
)
from .namespace import NS

__all__ = [
    'log', 'warn', 'debug',
]

logger = logging.getLogger('navdeck.bus')


def _log_sink(x):
    record = normalize_record(x, default_level='INFO', default_source='navdeck')
    if not should_emit_level(record['level']):
        return
    setup_navdeck_logging()
    level = getattr(logging, record['level'], logging.INFO)
    logger.log(level, record['message'], extra={
        'navdeck_source': record['source'],
        'navdeck_extra': record['extra'],
    })


def _with_default_level(x, level, source):
    if isinstance(x, dict):
        payload = dict(x)
        payload.setdefault('level', level)
        payload.setdefault('source', source)
        return payload
    return {'level': level, 'source': source, 'message': str(x)}


def _warn_sink(x):
    log.emit(_with_default_level(x, 'WARNING', 'navdeck.warn'))


def _debug_sink(x):
    log.emit(_with_default_level(x, 'DEBUG', 'navdeck.debug'))


log = NS('log', cache_max_len=10, cache_max_age_seconds=60 * 60 * 24)
log.sink(_log_sink)

warn = NS('warn')
warn.sink(_warn_sink)

debug = NS('debug')
debug.sink(_debug_sink)
