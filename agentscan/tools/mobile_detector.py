"""
Base device, platform and browser signatures.

The rule file follows the layout of the Mobile Detect database:

    https://github.com/serbanghita/Mobile-Detect

with an extra ``props`` section holding the version properties.
"""
import json
from collections import OrderedDict

from agentscan import paths
from agentscan.errors import RuleFileError
from agentscan.headers import cloudfront_headers, normalize_headers
from agentscan.logger import logger
from agentscan.matcher import PatternMatcher
from agentscan.rules import RuleTable, merge

CLOUDFRONT_USER_AGENT = 'Amazon CloudFront'

REQUIRED_SECTIONS = ('version', 'headerMatch', 'uaHttpHeaders', 'uaMatch')

REQUIRED_TABLES = ('phones', 'tablets', 'os', 'browsers')


class MobileDetector(object):
    def __init__(self, filename=None, matcher=None):
        self.filename = filename or paths.MOBILE_DETECT_RULES_PATH
        self.matcher = matcher or PatternMatcher()
        self.load_rules()

    def load_rules(self):
        with open(self.filename) as f:
            self.rules = json.load(f, object_pairs_hook=OrderedDict)

        for section in REQUIRED_SECTIONS:
            if section not in self.rules:
                raise RuleFileError("section '{}' not found in rule file: {}".
                                    format(section, self.filename))
        for table in REQUIRED_TABLES:
            if table not in self.rules['uaMatch']:
                raise RuleFileError(
                    "table 'uaMatch.{}' not found in rule file: {}".format(
                        table, self.filename))

        self.version = self.rules['version']
        self.mobile_headers = self.rules['headerMatch']
        self.ua_http_headers = tuple(self.rules['uaHttpHeaders'])

        self.phone_devices = RuleTable(self.rules['uaMatch']['phones'])
        self.tablet_devices = RuleTable(self.rules['uaMatch']['tablets'])
        self.operating_systems = RuleTable(self.rules['uaMatch']['os'])
        self.browsers = RuleTable(self.rules['uaMatch']['browsers'])
        self.properties = RuleTable(self.rules.get('props', {}))

        self.mobile_rules = merge(self.phone_devices, self.tablet_devices,
                                  self.operating_systems, self.browsers)

        logger.info('Loaded rule file {} (version {})'.format(
            self.filename, self.version))

    def check_headers_for_mobile(self, headers):
        """True if a header only sent by mobile gateways or browsers is set"""

        headers = normalize_headers(headers)
        for name, header_match in self.mobile_headers.items():
            value = headers.get(name)
            if value is None:
                continue
            if not header_match:
                return True
            for each in header_match.get('matches', ()):
                if each in value:
                    return True
        return False

    def is_mobile(self, user_agent, headers=None):
        if self.cloudfront_viewer(user_agent, headers, 'MOBILE'):
            return True
        if headers and self.check_headers_for_mobile(headers):
            return True
        return self.matcher.matches_any(self.mobile_rules, user_agent)

    def is_tablet(self, user_agent, headers=None):
        if self.cloudfront_viewer(user_agent, headers, 'TABLET'):
            return True
        return self.matcher.matches_any(self.tablet_devices, user_agent)

    def cloudfront_viewer(self, user_agent, headers, kind):
        if user_agent != CLOUDFRONT_USER_AGENT:
            return False
        value = cloudfront_headers(headers).get(
            'HTTP_CLOUDFRONT_IS_{}_VIEWER'.format(kind))
        return value == 'true'
