"""
Rule tables and their composition.

A rule table maps a label to the regular expressions that identify it. Order
is match priority: lookups walk a table from the top and the first matching
rule wins, so tables are always combined with ``merge`` and never with
``dict.update``.
"""
import json
import os
import threading
from collections import OrderedDict
from collections.abc import Mapping

from agentscan.errors import (InvalidRuleTableError, InvalidUserRulesFile,
                              RulesFileNotFoundError)
from agentscan.logger import logger

# Label of a rule whose match is its own label
POSITIONAL = ''

USER_RULE_SECTIONS = ('devices', 'os', 'browsers', 'properties')


def normalize_label(label):
    if label is None:
        return POSITIONAL
    return str(label)


def normalize_patterns(label, patterns):
    """Returns the alternatives of a rule as a tuple, dropping empty ones."""

    if isinstance(patterns, str):
        return (patterns, ) if patterns else ()

    if isinstance(patterns, (list, tuple)):
        for each in patterns:
            if not isinstance(each, str):
                raise InvalidRuleTableError(
                    "rule {!r} has a pattern that is not a string: {!r}".
                    format(label, each))
        return tuple(each for each in patterns if each)

    raise InvalidRuleTableError(
        "rule {!r} must be a pattern or a list of patterns, got {!r}".format(
            label, patterns))


class RuleTable(Mapping):
    """Ordered, read-only mapping of label to a tuple of alternatives.

    Accepts a mapping or an iterable of ``(label, patterns)`` pairs, where
    patterns is a single pattern or a list of them.
    """

    def __init__(self, rules=None):
        entries = OrderedDict()
        if rules is not None:
            items = rules.items() if isinstance(rules, Mapping) else rules
            for label, patterns in items:
                label = normalize_label(label)
                entries[label] = entries.get(label, ()) + normalize_patterns(
                    label, patterns)
        self._entries = entries

    def __getitem__(self, label):
        return self._entries[label]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return 'RuleTable({})'.format(list(self._entries.items()))


def merge(*tables):
    """Merges rule tables in priority order.

    A label keeps the position of its first occurrence. When it shows up again
    in a later table its alternatives are appended, so a collision widens the
    rule instead of replacing it.
    """

    merged = OrderedDict()
    for table in tables:
        if table is None:
            continue
        if not isinstance(table, RuleTable):
            table = RuleTable(table)
        for label, patterns in table.items():
            merged[label] = merged.get(label, ()) + patterns
    return RuleTable(merged)


DESKTOP_DEVICES = RuleTable([
    ('Macintosh', 'Macintosh'),
])

ADDITIONAL_OPERATING_SYSTEMS = RuleTable([
    ('Windows', 'Windows'),
    ('Windows NT', 'Windows NT'),
    ('OS X', 'Mac OS X'),
    ('Debian', 'Debian'),
    ('Ubuntu', 'Ubuntu'),
    ('Macintosh', 'PPC'),
    ('OpenBSD', 'OpenBSD'),
    ('Linux', 'Linux'),
    ('ChromeOS', 'CrOS'),
])

ADDITIONAL_BROWSERS = RuleTable([
    ('Opera Mini', 'Opera Mini'),
    ('Opera', 'Opera|OPR'),
    ('Edge', 'Edge|Edg'),
    ('Coc Coc', 'coc_coc_browser'),
    ('UCBrowser', 'UCBrowser'),
    ('Vivaldi', 'Vivaldi'),
    ('Chrome', 'Chrome'),
    ('Firefox', 'Firefox'),
    ('Safari', 'Safari'),
    ('IE', 'MSIE|IEMobile|MSIEMobile|Trident/[.0-9]+'),
    ('Netscape', 'Netscape'),
    ('Mozilla', 'Mozilla'),
    ('WeChat', 'MicroMessenger'),
])

ADDITIONAL_PROPERTIES = RuleTable([
    # Operating systems
    ('Windows', 'Windows NT [VER]'),
    ('Windows NT', 'Windows NT [VER]'),
    ('OS X', 'OS X [VER]'),
    ('BlackBerryOS', [r'BlackBerry[\w]+/[VER]', 'BlackBerry.*Version/[VER]',
                      'Version/[VER]']),
    ('AndroidOS', 'Android [VER]'),
    ('ChromeOS', 'CrOS x86_64 [VER]'),

    # Browsers
    ('Opera Mini', 'Opera Mini/[VER]'),
    ('Opera', [' OPR/[VER]', 'Opera Mini/[VER]', 'Version/[VER]',
               'Opera [VER]']),
    ('Netscape', 'Netscape/[VER]'),
    ('Mozilla', 'rv:[VER]'),
    ('IE', ['IEMobile/[VER];', 'IEMobile [VER]', 'MSIE [VER];', 'rv:[VER]']),
    ('Edge', ['Edge/[VER]', 'Edg/[VER]']),
    ('Vivaldi', 'Vivaldi/[VER]'),
    ('Coc Coc', 'coc_coc_browser/[VER]'),
])


class RuleRegistry(object):
    """Composes the base rule tables with the supplementary ones.

    ``base_rules`` supplies ``phone_devices``, ``tablet_devices``,
    ``operating_systems``, ``browsers`` and ``properties``. ``user_rules`` maps
    a section of USER_RULE_SECTIONS to a table merged in front of the built in
    supplementary table of that section.

    Every composite table is built once, on first use, and shared afterwards.
    """

    def __init__(self, base_rules, user_rules=None):
        self.base_rules = base_rules
        self.user_rules = user_rules or {}

        self._tables = {}
        self._lock = threading.RLock()

    def _memoized(self, name, build):
        table = self._tables.get(name)
        if table is None:
            with self._lock:
                table = self._tables.get(name)
                if table is None:
                    table = build()
                    self._tables[name] = table
                    logger.debug('Built {} table with {} rules'.format(
                        name, len(table)))
        return table

    def desktop_devices(self):
        return self._memoized(
            'desktop_devices',
            lambda: merge(self.user_rules.get('devices'), DESKTOP_DEVICES))

    def additional_operating_systems(self):
        return self._memoized(
            'additional_operating_systems',
            lambda: merge(self.user_rules.get('os'),
                          ADDITIONAL_OPERATING_SYSTEMS))

    def additional_browsers(self):
        return self._memoized(
            'additional_browsers',
            lambda: merge(self.user_rules.get('browsers'),
                          ADDITIONAL_BROWSERS))

    def additional_properties(self):
        return self._memoized(
            'additional_properties',
            lambda: merge(self.user_rules.get('properties'),
                          ADDITIONAL_PROPERTIES))

    def all_rules(self):
        return self._memoized(
            'all_rules', lambda: merge(
                self.desktop_devices(),
                self.base_rules.phone_devices,
                self.base_rules.tablet_devices,
                self.base_rules.operating_systems,
                self.additional_operating_systems(),
                self.base_rules.browsers,
                self.additional_browsers(), ))

    def browser_rules(self):
        return self._memoized(
            'browsers', lambda: merge(self.additional_browsers(),
                                      self.base_rules.browsers))

    def platform_rules(self):
        # Base systems first, so AndroidOS and iOS win over Linux and OS X
        return self._memoized(
            'platforms', lambda: merge(self.base_rules.operating_systems,
                                       self.additional_operating_systems()))

    def device_rules(self):
        return self._memoized(
            'devices', lambda: merge(self.desktop_devices(),
                                     self.base_rules.phone_devices,
                                     self.base_rules.tablet_devices))

    def property_rules(self):
        return self._memoized(
            'properties', lambda: merge(self.additional_properties(),
                                        self.base_rules.properties))


def load_user_rules(path):
    """Reads a JSON file of supplementary rules, keyed by section."""

    if not os.path.isfile(path):
        raise RulesFileNotFoundError(path)

    try:
        with open(path) as f:
            content = json.load(f, object_pairs_hook=OrderedDict)
    except ValueError as e:
        raise InvalidUserRulesFile(path, str(e))

    if not isinstance(content, dict):
        raise InvalidUserRulesFile(path, 'top level must be an object')

    unknown = [k for k in content if k not in USER_RULE_SECTIONS]
    if unknown:
        raise InvalidUserRulesFile(
            path, 'unknown sections: {}'.format(', '.join(unknown)))

    rules = {}
    for section, table in content.items():
        if not isinstance(table, dict):
            raise InvalidUserRulesFile(
                path, 'section {} must be an object'.format(section))
        try:
            rules[section] = RuleTable(table)
        except InvalidRuleTableError as e:
            raise InvalidUserRulesFile(path, str(e))

    logger.info('Loaded user rules from {} ({})'.format(
        path, ', '.join(rules) or 'empty'))
    return rules
