from shortlink.dao.file.record_file_dao import RecordFileDAO


__all__ = ['RecordFileDAO']
