"""
User agent classification.

A Classifier answers questions about a user agent (browser, platform, device,
device type, crawler) by walking rule tables from a RuleRegistry. Every method
accepts the user agent and, optionally, the request headers. When the user
agent is None it is read from the headers.

Device type is decided by a fixed chain: desktop, phone, tablet, robot, and
'other' when nothing applies. Desktop is what is neither mobile, tablet nor
robot; it is never a positive match against the desktop device rules, unlike
``device()``.
"""
import re
import threading
from collections import OrderedDict

from agentscan.headers import (cloudfront_headers, normalize_headers,
                               prepare_user_agent, user_agent_from_headers)
from agentscan.languages import parse_accept_language
from agentscan.matcher import NO_MATCH, PatternMatcher
from agentscan.rules import RuleRegistry
from agentscan.tools.crawler_detector import CrawlerMatcher
from agentscan.tools.mobile_detector import (CLOUDFRONT_USER_AGENT,
                                             MobileDetector)

DESKTOP_VIEWER_HEADER = 'HTTP_CLOUDFRONT_IS_DESKTOP_VIEWER'

VERSION_PATTERN = r'([\w._\+]+)'

DEVICE_TYPES = ('desktop', 'phone', 'tablet', 'robot', 'other')

_default_registry = None
_default_registry_lock = threading.Lock()


def default_registry():
    """Registry over the bundled rule file, created once per process"""

    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                _default_registry = RuleRegistry(MobileDetector())
    return _default_registry


def version_number(version):
    """Turns a version string into a float, '10_15_7' gives 10.157"""

    version = re.sub(r'[_ /]', '.', version)
    major, _, minor = version.partition('.')
    number = re.match(r'[0-9]*(\.[0-9]*)?', '{}.{}'.format(
        major, minor.replace('.', '')))
    try:
        return float(number.group(0))
    except ValueError:
        return 0.0


class Classifier(object):
    def __init__(self, registry=None, crawler_matcher=None, matcher=None):
        self.registry = registry or default_registry()
        self.crawler_matcher = crawler_matcher or CrawlerMatcher()
        self.matcher = matcher or PatternMatcher()

    @property
    def base_rules(self):
        return self.registry.base_rules

    def user_agent(self, user_agent=None, headers=None):
        if user_agent is None:
            return user_agent_from_headers(headers,
                                           self.base_rules.ua_http_headers)
        return prepare_user_agent(user_agent)

    def browser(self, user_agent=None, headers=None):
        return self.matcher.find_first_match(
            self.registry.browser_rules(), self.user_agent(user_agent, headers))

    def platform(self, user_agent=None, headers=None):
        return self.matcher.find_first_match(
            self.registry.platform_rules(),
            self.user_agent(user_agent, headers))

    def device(self, user_agent=None, headers=None):
        return self.matcher.find_first_match(
            self.registry.device_rules(), self.user_agent(user_agent, headers))

    def robot(self, user_agent=None, headers=None):
        name = self.crawler_matcher.matched_name(
            self.user_agent(user_agent, headers))
        if not name:
            return NO_MATCH
        return name[:1].upper() + name[1:]

    def is_robot(self, user_agent=None, headers=None):
        return self.crawler_matcher.is_crawler(
            self.user_agent(user_agent, headers))

    def is_mobile(self, user_agent=None, headers=None):
        return self.base_rules.is_mobile(
            self.user_agent(user_agent, headers), headers)

    def is_tablet(self, user_agent=None, headers=None):
        return self.base_rules.is_tablet(
            self.user_agent(user_agent, headers), headers)

    def is_phone(self, user_agent=None, headers=None):
        user_agent = self.user_agent(user_agent, headers)
        return self.is_mobile(user_agent, headers) and not self.is_tablet(
            user_agent, headers)

    def is_desktop(self, user_agent=None, headers=None):
        user_agent = self.user_agent(user_agent, headers)

        if user_agent == CLOUDFRONT_USER_AGENT:
            cf_headers = cloudfront_headers(headers)
            if DESKTOP_VIEWER_HEADER in cf_headers:
                return cf_headers[DESKTOP_VIEWER_HEADER] == 'true'

        # Nothing to classify
        if not user_agent:
            return False

        return (not self.is_mobile(user_agent, headers)
                and not self.is_tablet(user_agent, headers)
                and not self.is_robot(user_agent))

    def device_type(self, user_agent=None, headers=None):
        user_agent = self.user_agent(user_agent, headers)

        if self.is_desktop(user_agent, headers):
            return 'desktop'
        elif self.is_phone(user_agent, headers):
            return 'phone'
        elif self.is_tablet(user_agent, headers):
            return 'tablet'
        elif self.is_robot(user_agent):
            return 'robot'

        return 'other'

    def version(self, property_name, user_agent=None, headers=None,
                as_float=False):
        """Version of a browser, platform or other property, or NO_MATCH.

        Every alternative of the property is tried in turn and the first one
        capturing a version wins.
        """

        user_agent = self.user_agent(user_agent, headers)
        patterns = self.registry.property_rules().get(property_name)
        if not patterns or not user_agent:
            return NO_MATCH

        for each in patterns:
            found = self.matcher.match(
                each.replace('[VER]', VERSION_PATTERN), user_agent)
            if found and found.re.groups and found.group(1):
                version = found.group(1)
                return version_number(version) if as_float else version

        return NO_MATCH

    def matches(self, key, user_agent=None, headers=None):
        """True if the rule named key (any case) matches the user agent"""

        for label, patterns in self.registry.all_rules().items():
            if label.lower() == key.lower():
                return bool(
                    self.matcher.match(patterns,
                                       self.user_agent(user_agent, headers)))
        return False

    def languages(self, accept_language=None, headers=None):
        if accept_language is None:
            accept_language = normalize_headers(headers).get(
                'HTTP_ACCEPT_LANGUAGE')
        return parse_accept_language(accept_language)

    def classify(self, user_agent=None, headers=None, accept_language=None):
        user_agent = self.user_agent(user_agent, headers)

        browser = self.browser(user_agent)
        platform = self.platform(user_agent)

        ret = OrderedDict()
        ret['user_agent'] = user_agent
        ret['browser'] = browser or None
        ret['browser_version'] = (self.version(browser, user_agent) or None
                                  if browser else None)
        ret['platform'] = platform or None
        ret['platform_version'] = (self.version(platform, user_agent) or None
                                   if platform else None)
        ret['device'] = self.device(user_agent) or None
        ret['device_type'] = self.device_type(user_agent, headers)
        ret['robot'] = self.robot(user_agent) or None
        ret['languages'] = self.languages(accept_language, headers)
        return ret
