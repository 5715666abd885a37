from shortlink.models.url_record_model import ClickEvent, UrlRecord
from shortlink.models.submission_model import SubmissionRequest
from shortlink.models.outcome_model import ResolutionOutcome, Redirect, NotFound, Expired
from shortlink.models.stats_model import RecordStats


__all__ = [
    'ClickEvent',
    'UrlRecord',
    'SubmissionRequest',
    'ResolutionOutcome',
    'Redirect',
    'NotFound',
    'Expired',
    'RecordStats',
]
