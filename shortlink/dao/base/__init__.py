from shortlink.dao.base.record_base_dao import RecordBaseDAO


__all__ = ['RecordBaseDAO']
