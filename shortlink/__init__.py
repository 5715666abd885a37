from shortlink.models import ClickEvent, UrlRecord, SubmissionRequest, Redirect, NotFound, Expired, RecordStats
from shortlink.submission import submit, validate_submissions
from shortlink.resolver import resolve
from shortlink.stats import collect_statistics, record_statistics
from shortlink.service import ShortLinkService


__all__ = [
    'ClickEvent',
    'UrlRecord',
    'SubmissionRequest',
    'Redirect',
    'NotFound',
    'Expired',
    'RecordStats',
    'submit',
    'validate_submissions',
    'resolve',
    'collect_statistics',
    'record_statistics',
    'ShortLinkService',
]
