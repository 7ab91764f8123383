import collections
import collections.abc
from datetime import datetime, timedelta
import functools
import inspect
import io
import itertools
import logging
import weakref

from tornado.ioloop import IOLoop
from expiringdict import ExpiringDict
from pampy import match, ANY

__all__ = ['Stream', 'sink', 'map', 'filter', 'get_io_loop']

# sinks add themselves here to avoid being garbage-collected
_global_sinks = set()

logger = logging.getLogger(__name__)


class OrderedSet(collections.abc.MutableSet):
    def __init__(self, values=()):
        self._od = collections.OrderedDict().fromkeys(values)

    def __len__(self):
        return len(self._od)

    def __iter__(self):
        return iter(self._od)

    def __contains__(self, value):
        return value in self._od

    def add(self, value):
        self._od[value] = None

    def discard(self, value):
        self._od.pop(value, None)


class OrderedWeakrefSet(weakref.WeakSet):
    def __init__(self, values=()):
        super(OrderedWeakrefSet, self).__init__()
        self.data = OrderedSet()
        for elem in values:
            self.add(elem)


def get_io_loop():
    """The loop follow-up tasks are scheduled on: the caller's current loop."""
    return IOLoop.current()


def identity(x):
    return x


class Stream(object):
    """ A Stream is an infinite sequence of events

    Streams subscribe to each other passing and transforming data between
    them. A Stream object listens for updates from upstream, reacts to these
    updates, and then emits more data to flow downstream to all Stream
    objects that subscribe to it.

    All controllers in this package publish their observable state through
    streams: the render layer subscribes with ``sink`` and never touches the
    controller state directly.

    Parameters
    ----------
    name: str, optional
    cache_max_len, cache_max_age_seconds: int, optional
        Keep the most recent emitted values in an expiring cache, read back
        with ``recent``.
    refuse_none: bool
        Do not pass ``None`` downstream.

    Examples
    --------
    >>> source = Stream()
    >>> L = source.map(str.upper).to_list()
    >>> source.emit('/dashboard')
    >>> L
    ['/DASHBOARD']
    """

    str_list = ['func', 'predicate', 'cache_max_len']

    def __init__(self, upstream=None, upstreams=None, name=None,
                 cache_max_len=None, cache_max_age_seconds=None,
                 refuse_none=True):
        self.downstreams = OrderedWeakrefSet()
        if upstreams is not None:
            self.upstreams = list(upstreams)
        else:
            self.upstreams = [upstream]

        for upstream in self.upstreams:
            if upstream:
                upstream.downstreams.add(self)

        self.name = name

        self.cache = {}
        self.is_cache = False
        self._seq = itertools.count()
        if cache_max_len or cache_max_age_seconds:
            self.start_cache(cache_max_len, cache_max_age_seconds)

        self.refuse_none = refuse_none

    def start_cache(self, cache_max_len=None, cache_max_age_seconds=None):
        self.is_cache = True
        self.cache_max_len = cache_max_len or 1
        self.cache_max_age_seconds = cache_max_age_seconds or 60 * 5
        self.cache = ExpiringDict(
            max_len=self.cache_max_len,
            max_age_seconds=self.cache_max_age_seconds
        )

    @classmethod
    def register_api(cls, modifier=identity):
        """ Add callable to Stream API

        This allows you to register a new method onto this class.  You can use
        it as a decorator.::

            >>> @Stream.register_api()
            ... class foo(Stream):
            ...     ...

            >>> Stream().foo(...)  # this works now
        """
        def _(func):
            @functools.wraps(func)
            def wrapped(*args, **kwargs):
                return func(*args, **kwargs)
            setattr(cls, func.__name__, modifier(wrapped))
            return func
        return _

    def __str__(self):
        s_list = []
        if self.name:
            s_list.append('{}; {}'.format(
                self.name, self.__class__.__name__))
        else:
            s_list.append(self.__class__.__name__)

        for m in self.str_list:
            s = ''
            at = getattr(self, m, None)
            if at:
                if not callable(at):
                    s = str(at)
                elif hasattr(at, '__name__'):
                    s = at.__name__
                else:
                    s = at.__class__.__name__
            if s:
                s_list.append('{}={}'.format(m, s))

        text = "<"
        text += s_list[0]
        if len(s_list) > 1:
            text += ': '
            text += ', '.join(s_list[1:])
        text += '>'
        return text

    __repr__ = __str__

    def _emit(self, x):
        if self.is_cache:
            self.cache[(datetime.now(), next(self._seq))] = x

        if self.refuse_none and x is None:
            return

        result = []
        for downstream in list(self.downstreams):
            r = downstream.update(x, who=self)
            if type(r) is list:
                result.extend(r)
            else:
                result.append(r)

        return [element for element in result if element is not None]

    def emit(self, x):
        """ Push data into the stream at this point

        This is typically done only at source Streams but can theoretically
        be done at any point. Delivery is synchronous: every downstream has
        seen ``x`` when this returns.
        """
        return self._emit(x)

    def update(self, x, who=None):
        return self._emit(x)

    def destroy(self, streams=None):
        """
        Disconnect this stream from any upstream sources
        """
        if streams is None:
            streams = self.upstreams
        for upstream in list(streams):
            if upstream is None:
                continue
            upstream.downstreams.discard(self)
            self.upstreams.remove(upstream)

    def to_list(self):
        """ Append all elements of a stream to a list as they come in

        Examples
        --------
        >>> source = Stream()
        >>> L = source.map(lambda x: 10 * x).to_list()
        >>> for i in range(5):
        ...     source.emit(i)
        >>> L
        [0, 10, 20, 30, 40]
        """
        L = []
        self.sink(L.append)
        return L

    def __rrshift__(self, value):  # stream左边的>>
        """emit value to stream, return the value"""
        self.emit(value)
        return value

    def __rshift__(self, ref):  # stream右边的>>
        """Stream右边>>,sink到右边的对象.

        支持类型: list | text file | stream | callable
        """
        result = match(ref,
                       list, lambda ref: self.sink(ref.append),
                       io.TextIOBase, lambda ref: self.sink(
                           lambda x: ref.write('{}\n'.format(x))),
                       Stream, lambda ref: self.sink(ref.emit),
                       callable, lambda ref: self.sink(ref),
                       ANY, lambda ref: self._unsupported(ref)
                       )
        if isinstance(result, TypeError):
            raise result
        return result

    def _unsupported(self, ref):
        return TypeError(
            f'{ref}:{type(ref)} is '
            'Unsupported type, must be '
            'list | text file | stream | callable')

    def recent(self, n=5, seconds=None):
        """The most recent cached values, oldest first."""
        if not self.is_cache:
            return []
        items = list(self.cache.items())
        if seconds:
            begin = datetime.now() - timedelta(seconds=seconds)
            return [value for (ts, _), value in items if begin < ts]
        return [value for _, value in items][-n:]

    def __iter__(self,):
        return iter(list(self.cache.values()))


class Sink(Stream):

    def __init__(self, upstream, **kwargs):
        super().__init__(upstream, **kwargs)
        _global_sinks.add(self)


@Stream.register_api()
class sink(Sink):
    """ Apply a function on every element

    Parameters
    ----------
    func: callable
        A function that will be applied on every element.
    args:
        Positional arguments that will be passed to ``func`` after the
        incoming element.
    kwargs:
        Stream-specific arguments will be passed to ``Stream.__init__``, the
        rest of them will be passed to ``func``.

    Examples
    --------
    >>> source = Stream()
    >>> L = list()
    >>> source.sink(L.append)
    >>> source.emit(123)
    >>> L
    [123]
    """

    def __init__(self, upstream, func, *args, **kwargs):
        self.func = func
        # take the stream specific kwargs out
        sig = set(inspect.signature(Stream).parameters)
        stream_kwargs = {k: v for (k, v) in kwargs.items() if k in sig}
        self.kwargs = {k: v for (k, v) in kwargs.items() if k not in sig}
        self.args = args
        super().__init__(upstream, **stream_kwargs)

    def update(self, x, who=None):
        try:
            self.func(x, *self.args, **self.kwargs)
        except Exception as e:
            logger.exception(e)
            raise
        return []

    def destroy(self):
        super().destroy()
        _global_sinks.discard(self)


@Stream.register_api()
class map(Stream):
    """ Apply a function to every element in the stream

    Examples
    --------
    >>> source = Stream()
    >>> source.map(lambda x: 2*x).sink(print)
    >>> for i in range(3):
    ...     source.emit(i)
    0
    2
    4
    """

    def __init__(self, upstream, func=None, *args, **kwargs):
        self.func = func
        # this is one of a few stream specific kwargs
        name = kwargs.pop('name', None)
        self.kwargs = kwargs
        self.args = args

        Stream.__init__(self, upstream, name=name)

    def update(self, x, who=None):
        try:
            result = self.func(x, *self.args, **self.kwargs)
        except Exception as e:
            logger.exception(e)
            raise
        else:
            return self._emit(result)


def _truthy(x):
    return not not x


@Stream.register_api()
class filter(Stream):
    """ Only pass through elements that satisfy the predicate

    Examples
    --------
    >>> source = Stream()
    >>> source.filter(lambda x: x % 2 == 0).sink(print)
    >>> for i in range(5):
    ...     source.emit(i)
    0
    2
    4
    """

    def __init__(self, upstream, predicate, *args, **kwargs):
        if predicate is None:
            predicate = _truthy
        self.predicate = predicate
        name = kwargs.pop('name', None)
        self.kwargs = kwargs
        self.args = args

        Stream.__init__(self, upstream, name=name,)

    def update(self, x, who=None):
        if self.predicate(x, *self.args, **self.kwargs):
            return self._emit(x)
