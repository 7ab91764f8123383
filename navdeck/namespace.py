"""全局命名空间

同名对象在进程内是单例，命名流用于把各个会话的事件汇总到一处
（例如所有会话的提示都汇入 ``NS('warn')``）。

    >>> warn = NS('warn')
    >>> assert NS('warn') is warn
"""

from .core import Stream


class Namespace(dict):
    """命名空间类，继承自dict，按类型存放命名对象"""

    def __init__(self):
        self['stream'] = {}

    def create(self, name, typ='stream', **kwargs):
        """创建或获取一个命名对象

        Args:
            name: 对象名称,用于唯一标识
            typ: 对象类型,目前只有 stream
            **kwargs: 首次创建时传给构造函数的参数
        """
        constructor = {
            'stream': Stream,
        }

        try:
            return self[typ][name]
        except KeyError:
            return self[typ].setdefault(
                name,
                constructor[typ](name=name, **kwargs)
            )


namespace = Namespace()


def NS(name='', **kwargs):
    """命名流.

    创建或获取一个命名的Stream对象,全局名称唯一
    """
    return namespace.create(name, typ='stream', **kwargs)
