"""Checkers for the ``format`` keyword.

Each checker takes a string and returns True when it conforms to the named
format. The ``format`` validator passes non-string instances before a
checker is consulted.
"""

import datetime
import ipaddress
import re
from typing import Callable, Dict
from urllib.parse import urlsplit

# RFC 3339 patterns
DATE_PATTERN = re.compile(r'^(\d{4})-(\d{2})-(\d{2})\Z', re.ASCII)
TIME_PATTERN = re.compile(
    r'^(\d{2}):(\d{2}):(\d{2})(\.\d+)?(?:([zZ])|([+-])(\d{2}):(\d{2}))\Z', re.ASCII
)
DURATION_PATTERN = re.compile(
    r'^P(?:\d+W|(?=\d|T\d)(?:\d+Y)?(?:\d+M)?(?:\d+D)?(?:T(?=\d)(?:\d+H)?(?:\d+M)?(?:\d+S)?)?)\Z', re.ASCII
)
UUID_PATTERN = re.compile(
    r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\Z'
)
IPV4_PATTERN = re.compile(r'^(?:(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)\.){3}(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)\Z',
                          re.ASCII)
HOSTNAME_LABEL_PATTERN = re.compile(r'^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\Z')
EMAIL_LOCAL_PATTERN = re.compile(r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*\Z")
IDN_EMAIL_LOCAL_PATTERN = re.compile(r"^[^\s@.\"(),:;<>\[\]\\]+(?:\.[^\s@.\"(),:;<>\[\]\\]+)*\Z")
URI_SCHEME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*\Z')
URI_TEMPLATE_PATTERN = re.compile(r'^(?:[^{}\s<>\x22\x27\\^`|\x00-\x1f\x7f]|\{[+#./;?&=,!@|]?[A-Za-z0-9_%.]+(?::\d+|\*)?'
                                  r'(?:,[A-Za-z0-9_%.]+(?::\d+|\*)?)*\})*\Z')
JSON_POINTER_PATTERN = re.compile(r'^(?:/(?:[^~/]|~[01])*)*\Z')
RELATIVE_JSON_POINTER_PATTERN = re.compile(r'^(?:0|[1-9]\d*)(?:#|(?:/(?:[^~/]|~[01])*)*)\Z', re.ASCII)
# characters never allowed in a URI or IRI reference
URI_EXCLUDED_PATTERN = re.compile(r'[\s<>"{}|\\^`\x00-\x1f\x7f]')
PERCENT_PATTERN = re.compile(r'%(?![0-9A-Fa-f]{2})')


def check_date(value: str) -> bool:
    match = DATE_PATTERN.match(value)
    if not match:
        return False
    try:
        datetime.date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return False
    return True


def check_time(value: str) -> bool:
    match = TIME_PATTERN.match(value)
    if not match:
        return False
    hour, minute, second = int(match.group(1)), int(match.group(2)), int(match.group(3))
    if hour > 23 or minute > 59 or second > 60:
        return False
    offset_hour = offset_minute = 0
    if match.group(6):
        offset_hour, offset_minute = int(match.group(7)), int(match.group(8))
        if offset_hour > 23 or offset_minute > 59:
            return False
    if second == 60:
        # a leap second is only valid at 23:59:60 UTC
        sign = -1 if match.group(6) == '-' else 1
        utc_minutes = (hour * 60 + minute - sign * (offset_hour * 60 + offset_minute)) % (24 * 60)
        return utc_minutes == 23 * 60 + 59
    return True


def check_date_time(value: str) -> bool:
    parts = re.split('[Tt]', value, maxsplit=1)
    return len(parts) == 2 and check_date(parts[0]) and check_time(parts[1])


def check_duration(value: str) -> bool:
    return DURATION_PATTERN.match(value) is not None


def check_uuid(value: str) -> bool:
    return UUID_PATTERN.match(value) is not None


def check_ipv4(value: str) -> bool:
    return IPV4_PATTERN.match(value) is not None


def check_ipv6(value: str) -> bool:
    if '%' in value or not value.isascii():
        return False
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def check_hostname(value: str) -> bool:
    hostname = value[:-1] if value.endswith('.') else value
    if not hostname or len(hostname) > 253:
        return False
    return all(HOSTNAME_LABEL_PATTERN.match(label) for label in hostname.split('.'))


def check_idn_hostname(value: str) -> bool:
    try:
        ascii_form = value.encode('idna').decode('ascii')
    except UnicodeError:
        return False
    return check_hostname(ascii_form)


def _split_email(value: str):
    local, sep, domain = value.rpartition('@')
    if not sep or not local or not domain:
        return None
    return local, domain


def _check_email_domain(domain: str, hostname_checker: Callable[[str], bool]) -> bool:
    if domain.startswith('[') and domain.endswith(']'):
        literal = domain[1:-1]
        if literal.lower().startswith('ipv6:'):
            return check_ipv6(literal[5:])
        return check_ipv4(literal)
    return hostname_checker(domain)


def check_email(value: str) -> bool:
    parts = _split_email(value)
    if parts is None:
        return False
    local, domain = parts
    if not (EMAIL_LOCAL_PATTERN.match(local) or (len(local) > 1 and local[0] == local[-1] == '"')):
        return False
    return _check_email_domain(domain, check_hostname)


def check_idn_email(value: str) -> bool:
    parts = _split_email(value)
    if parts is None:
        return False
    local, domain = parts
    if not (IDN_EMAIL_LOCAL_PATTERN.match(local) or (len(local) > 1 and local[0] == local[-1] == '"')):
        return False
    return _check_email_domain(domain, check_idn_hostname)


def check_iri_reference(value: str) -> bool:
    if URI_EXCLUDED_PATTERN.search(value) or PERCENT_PATTERN.search(value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return not parts.scheme or URI_SCHEME_PATTERN.match(parts.scheme) is not None


def check_iri(value: str) -> bool:
    if not check_iri_reference(value):
        return False
    return bool(urlsplit(value).scheme) and ':' in value


def check_uri_reference(value: str) -> bool:
    return value.isascii() and check_iri_reference(value)


def check_uri(value: str) -> bool:
    return value.isascii() and check_iri(value)


def check_uri_template(value: str) -> bool:
    return URI_TEMPLATE_PATTERN.match(value) is not None


def check_json_pointer(value: str) -> bool:
    return JSON_POINTER_PATTERN.match(value) is not None


def check_relative_json_pointer(value: str) -> bool:
    return RELATIVE_JSON_POINTER_PATTERN.match(value) is not None


def check_regex(value: str) -> bool:
    try:
        re.compile(value)
    except re.error:
        return False
    return True


FORMAT_CHECKERS: Dict[str, Callable[[str], bool]] = {
    'date': check_date,
    'time': check_time,
    'date-time': check_date_time,
    'duration': check_duration,
    'email': check_email,
    'idn-email': check_idn_email,
    'hostname': check_hostname,
    'idn-hostname': check_idn_hostname,
    'ipv4': check_ipv4,
    'ipv6': check_ipv6,
    'uri': check_uri,
    'uri-reference': check_uri_reference,
    'iri': check_iri,
    'iri-reference': check_iri_reference,
    'uri-template': check_uri_template,
    'uuid': check_uuid,
    'json-pointer': check_json_pointer,
    'relative-json-pointer': check_relative_json_pointer,
    'regex': check_regex,
}
