from collections import OrderedDict

from agentscan.logger import logger

DEFAULT_PRIORITY = 1.0


def parse_priority(part):
    part = part.strip()
    if not part.startswith('q='):
        return DEFAULT_PRIORITY
    try:
        priority = float(part[2:])
    except ValueError:
        priority = None

    # nan is not a priority
    if priority is None or priority != priority:
        logger.debug('Invalid quality factor {!r}'.format(part))
        return DEFAULT_PRIORITY
    return priority


def parse_accept_language(accept_language):
    """Returns the language tags of an Accept-Language value, best first.

    A tag seen twice keeps its first position and its last priority. Tags
    with the same priority keep the order of the header.
    """

    if not accept_language:
        return []

    languages = OrderedDict()
    for piece in accept_language.split(','):
        parts = piece.split(';')
        language = parts[0].strip().lower()
        if not language:
            continue
        priority = parse_priority(parts[1]) if len(parts) > 1 else DEFAULT_PRIORITY
        languages[language] = priority

    return sorted(languages, key=lambda k: languages[k], reverse=True)
