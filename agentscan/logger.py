import logging

from agentscan import paths

logger = logging.getLogger('agentscan')
logger.setLevel(logging.INFO)
logger.addHandler(logging.NullHandler())


def setup_file_logging(filename=paths.LOG_FILE):
    """Sends the 'agentscan' records to a log file. Only the command line
    tool calls this, the library leaves handlers to the application."""

    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return handler

    # create file handler
    fh = logging.FileHandler(filename)
    fh.setLevel(logging.INFO)

    # create formatter and add it to the handlers
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    fh.setFormatter(formatter)

    # add the handler to logger
    logger.addHandler(fh)
    return fh
