from shortlink.dao.base import RecordBaseDAO
from shortlink.dao.memory import RecordMemoryDAO
from shortlink.dao.file import RecordFileDAO
from shortlink.dao.factory import build_dao


__all__ = [
    'RecordBaseDAO',
    'RecordMemoryDAO',
    'RecordFileDAO',
    'build_dao',
]
