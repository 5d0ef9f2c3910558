import argparse


def header(value):
    """argparse type for NAME=VALUE headers"""

    name, sep, content = value.partition('=')
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(
            "header must look like NAME=VALUE, got '{}'".format(value))
    return name.strip(), content


class Arguments(object):
    def __init__(self, user_agents, user_agents_file, user_rules_file,
                 accept_language, headers, json_output, file_output):

        self.user_agents = user_agents or []
        self.user_agents_file = user_agents_file
        self.user_rules_file = user_rules_file
        self.accept_language = accept_language
        self.headers = dict(headers or [])
        self.json_output = json_output
        self.file_output = file_output

    def load_user_agents(self):
        """User agents from the command line, then from the file, if any.

        Blank lines and comment lines ('#', leading whitespace allowed) in the
        file are skipped.
        """

        user_agents = list(self.user_agents)

        if self.user_agents_file:
            with open(self.user_agents_file) as f:
                for each in f.read().splitlines():
                    if each.strip() and not each.strip().startswith('#'):
                        user_agents.append(each)

        return user_agents

    @staticmethod
    def create_parser():

        parser = argparse.ArgumentParser(
            description="Classify user agents into browser, platform, device and device type",
            epilog="Rule files are JSON objects with 'devices', 'os', 'browsers' and 'properties' sections"
        )
        parser.add_argument(
            'user_agents', nargs='*', help='User agents to classify')
        parser.add_argument(
            "-f", "--file", help="File with one user agent per line")
        parser.add_argument(
            "-r",
            "--rules",
            help="User's rule file, its rules are checked before the built in ones"
        )
        parser.add_argument(
            "-l",
            "--language",
            help="Accept-Language header sent along with the user agents")
        parser.add_argument(
            "-H",
            "--header",
            action='append',
            type=header,
            default=[],
            help="Extra request header as NAME=VALUE. Can be repeated.")
        parser.add_argument(
            "-j",
            "--json",
            help="Outputs information in JSON format.",
            action="store_true")
        parser.add_argument(
            "-o",
            "--output",
            help="Output file to write report. Works when --json option is NOT set."
        )
        return parser
