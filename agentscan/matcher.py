import re
from functools import lru_cache

from agentscan.rules import POSITIONAL


class NoMatch(object):
    """Result of a lookup that found no rule. Falsy, and a singleton."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return 'NO_MATCH'


NO_MATCH = NoMatch()


@lru_cache(maxsize=1024)
def compile_pattern(pattern):
    return re.compile(pattern, re.IGNORECASE | re.DOTALL)


class PatternMatcher(object):
    def match(self, patterns, subject):
        """Searches subject for any of the alternatives in patterns.

        patterns may be a single pattern or a sequence of alternatives.
        """

        if not patterns or not subject:
            return None
        if not isinstance(patterns, str):
            patterns = '|'.join(patterns)
        return compile_pattern(patterns).search(subject)

    def find_first_match(self, table, subject):
        """Returns the label of the first rule of table matching subject.

        Rules are tried in table order, the first match wins. A positional
        rule answers with the first capture group that took part in the
        match, or the whole match when there is none.
        """

        for label, patterns in table.items():
            if not patterns:
                continue

            found = self.match(patterns, subject)
            if found:
                if label != POSITIONAL:
                    return label
                return next((g for g in found.groups() if g), found.group(0))

        return NO_MATCH

    def matches_any(self, table, subject):
        return any(
            self.match(patterns, subject) for patterns in table.values())
