from dataclasses import dataclass
from typing import Any


# fmt: off
@dataclass(frozen=True)
class SubmissionRequest:
    long_url: Any                   # URL to shorten, validated by the submission pipeline
    validity_minutes: Any = None    # Raw validity as submitted (number or numeric string), None if omitted
    shortcode: Any = None           # Custom shortcode, None or '' if omitted
# fmt: on

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'SubmissionRequest':
        """Build a request from a submitted form/JSON object.

        Accepts camelCase and snake_case keys, plus `validityPeriod` as used by the
        original shorten form.
        """
        validity = data.get('validityMinutes', data.get('validity_minutes', data.get('validityPeriod')))
        return cls(
            long_url=data.get('longUrl', data.get('long_url')),
            validity_minutes=validity,
            shortcode=data.get('shortcode'),
        )
