import re

from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _

from .normalizer import normalize_domain

DNS_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


def validate_dns_label(value):
    """
    Validate a single DNS label according to RFC 1034/1035:
    - Only letters, digits, and hyphens.
    - Cannot start or end with a hyphen.
    - Length between 1 and 63 characters.
    """
    if not isinstance(value, str) or not DNS_LABEL.match(value):
        raise ValidationError(
            _("%(value)s is not a valid DNS label."),
            params={"value": value},
        )


def validate_domain_name(value):
    """
    Validate a host name after normalization: at most 253 characters, made
    of valid DNS labels separated by dots.
    """
    host = normalize_domain(value)
    if host is None or len(host) > 253:
        raise ValidationError(
            _("%(value)s is not a valid domain name."),
            params={"value": value},
        )
    for label in host.split("."):
        validate_dns_label(label)


def validate_domain_list(value):
    if value is None:
        return
    if not isinstance(value, list):
        raise ValidationError(_("Domains must be a list of strings."))
    for domain in value:
        validate_domain_name(domain)
