import sys

from agentscan import utils
from agentscan.arguments import Arguments
from agentscan.logger import logger, setup_file_logging
from agentscan.scanner import AgentScan


def main(argv=None):
    setup_file_logging()

    parser = Arguments.create_parser()
    args = parser.parse_args(argv)
    if not args.user_agents and not args.file:
        parser.error('no user agents given, pass them as arguments or with --file')

    arguments = Arguments(args.user_agents, args.file, args.rules,
                          args.language, args.header, args.json, args.output)

    try:
        user_agents = arguments.load_user_agents()
    except OSError as e:
        utils.report_error("--file option passed is not a readable file",
                           arguments.json_output)
        logger.error(e)
        sys.exit(1)

    agentscan = AgentScan(arguments)
    agentscan.run(user_agents)
    agentscan.print_info()
    logger.info('agentscan ended successfully')


if __name__ == '__main__':
    main()
