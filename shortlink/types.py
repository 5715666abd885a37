from typing import Any

from botocore.client import BaseClient


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type Configuration = dict[str, Any]
type RecordDocument = dict[str, Any]
type SubmissionErrors = dict[str, str]

# Type aliases for boto3 clients
type S3Client = BaseClient
