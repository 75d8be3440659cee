"""
Placeholder Substitution Module.

Resolves ``{{...}}`` tokens inside footer and cover page template strings.

Recognized tokens:
    {{vendor.email}}     - vendor email
    {{vendor.userId}}    - vendor user id
    {{now}}              - current UTC time, e.g. 2026-10-17T14:30:22
    {{metadata.<key>}}   - extracted field value; left as-is when absent

Substitution is a single pass over the template; replacement values are
never scanned again for tokens.

Author: ML Engineering Team
"""

import re
from dataclasses import dataclass
from typing import Mapping, Optional

from config import get_config
from fiscal_stamp.utils.helpers import utc_timestamp

PLACEHOLDER_PATTERN = re.compile(
    r'\{\{(vendor\.email|vendor\.userId|now|metadata\.([^{}]+))\}\}'
)


@dataclass(frozen=True)
class VendorContext:
    """
    Vendor identity used for placeholder resolution.

    Attributes:
        email: Vendor email address
        user_id: Vendor user identifier
    """
    email: str = ""
    user_id: str = ""


def substitute(
    template: Optional[str],
    extracted_fields: Optional[Mapping[str, str]] = None,
    vendor: Optional[VendorContext] = None
) -> Optional[str]:
    """
    Replace placeholder tokens in a template string.

    Args:
        template: Template text; empty or None is returned unchanged.
        extracted_fields: Field values for ``{{metadata.<key>}}`` tokens.
        vendor: Vendor identity for ``{{vendor.*}}`` tokens.

    Returns:
        Template with every resolvable token replaced.

    Example:
        >>> vendor = VendorContext(email="a@b.com", user_id="42")
        >>> substitute("Procesado por {{vendor.email}}", {}, vendor)
        'Procesado por a@b.com'
        >>> substitute("{{metadata.missing}}", {}, vendor)
        '{{metadata.missing}}'
    """
    if not template:
        return template

    fields = extracted_fields or {}
    vendor = vendor or VendorContext()
    # One timestamp per call so repeated {{now}} tokens agree
    now = utc_timestamp(get_config("placeholders.now_format", "%Y-%m-%dT%H:%M:%S"))

    def _replace(match: re.Match) -> str:
        token = match.group(1)

        if token == "vendor.email":
            return vendor.email or ""
        if token == "vendor.userId":
            return vendor.user_id or ""
        if token == "now":
            return now

        key = match.group(2)
        if key in fields and fields[key] is not None:
            return str(fields[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, template)
