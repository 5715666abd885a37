from shortlink.dao.s3.record_s3_dao import RecordS3DAO


__all__ = ['RecordS3DAO']
