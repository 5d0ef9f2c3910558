from agentscan.agent import DEVICE_TYPES, Classifier, default_registry
from agentscan.languages import parse_accept_language
from agentscan.matcher import NO_MATCH, PatternMatcher
from agentscan.rules import RuleRegistry, RuleTable, merge

__version__ = '0.1'
