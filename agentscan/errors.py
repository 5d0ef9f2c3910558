class RuleFileError(Exception):
    pass


class InvalidRuleTableError(Exception):
    pass


class RulesFileNotFoundError(Exception):
    pass


class InvalidUserRulesFile(Exception):
    def __init__(self, filename, reason=None):
        super().__init__(filename, reason)
        self.filename = filename
        self.reason = reason
