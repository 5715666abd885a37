import functools
from typing import TypeVar, Any
from collections.abc import Callable

from botocore.exceptions import BotoCoreError, ClientError

from shortlink.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_s3_client_error[F](method: F) -> F:
    """Wrap S3-interacting DAO methods to handle AWS API errors

    Args:
        method (Callable[..., Any]):
            DAO method performing S3 operations which may raise botocore errors.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on S3 failures.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', 'Unknown')
            raise DataStoreError(f"S3 request for s3://{self.bucket}/{self.key} failed ({code}).") from e
        except BotoCoreError as e:
            raise DataStoreError(f"Can't reach S3 for s3://{self.bucket}/{self.key}.") from e

    return wrapper
