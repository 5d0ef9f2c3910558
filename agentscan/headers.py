"""
Helpers for request header maps.

Headers are handled with their CGI names (``HTTP_USER_AGENT``), which is what
WSGI environments carry. Plain header names (``User-Agent``) are converted.
"""

CLOUDFRONT_PREFIX = 'HTTP_CLOUDFRONT_'

# Longest user agent considered, longer values are cut
MAXIMUM_USER_AGENT_LENGTH = 500


def header_key(name):
    key = name.strip().upper().replace('-', '_')
    if not key.startswith('HTTP_'):
        key = 'HTTP_' + key
    return key


def normalize_headers(headers):
    if not headers:
        return {}
    return {header_key(k): str(v) for k, v in headers.items() if v is not None}


def cloudfront_headers(headers):
    return {
        k: v
        for k, v in normalize_headers(headers).items()
        if k.startswith(CLOUDFRONT_PREFIX)
    }


def prepare_user_agent(user_agent):
    if not user_agent:
        return ''
    return user_agent.strip()[:MAXIMUM_USER_AGENT_LENGTH]


def user_agent_from_headers(headers, ua_http_headers):
    """Joins every header that may carry the user agent, in list order"""

    headers = normalize_headers(headers)
    values = [headers[k] for k in ua_http_headers if headers.get(k)]
    return prepare_user_agent(' '.join(values))
