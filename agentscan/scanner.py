import sys

from agentscan import utils
from agentscan.agent import Classifier, default_registry
from agentscan.errors import (InvalidUserRulesFile, RuleFileError,
                              RulesFileNotFoundError)
from agentscan.logger import logger
from agentscan.rules import RuleRegistry, load_user_rules
from agentscan.tools.device_models import device_model
from agentscan.tools.mobile_detector import MobileDetector


class AgentScan(object):
    def __init__(self, arguments):

        self.arguments = arguments

        try:
            if self.arguments.user_rules_file:
                user_rules = load_user_rules(self.arguments.user_rules_file)
                registry = RuleRegistry(MobileDetector(), user_rules)
            else:
                registry = default_registry()

        except RulesFileNotFoundError as e:
            utils.report_error("--rules option passed is not a valid file",
                               self.arguments.json_output)
            logger.error(e)
            sys.exit(1)
        except InvalidUserRulesFile as e:
            utils.report_error(
                "file {} does not match specified format for rule files ({})".
                format(e.filename, e.reason), self.arguments.json_output)
            logger.error(e)
            sys.exit(1)
        except RuleFileError as e:
            utils.report_error("bundled rule file is not valid",
                               self.arguments.json_output)
            logger.error(e)
            sys.exit(1)

        logger.info('Finish loading rules')
        self.classifier = Classifier(registry)
        self.results = []

    def run(self, user_agents):
        logger.info('Classifying {} user agents'.format(len(user_agents)))
        self.results = [self.analyze(each) for each in user_agents]

    def analyze(self, user_agent):
        result = self.classifier.classify(user_agent, self.arguments.headers,
                                          self.arguments.accept_language)
        result['brand'], result['model'] = device_model(result['user_agent'])
        return result

    def print_info(self):
        if self.arguments.json_output:
            print(utils.to_json(self.results))
        else:
            utils.pretty_print(self.results, self.arguments.file_output)
