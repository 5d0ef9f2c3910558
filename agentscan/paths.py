import os

BASE_DIR = os.path.dirname(__file__)

MOBILE_DETECT_RULES_PATH = os.path.join(BASE_DIR,
                                        './db/mobile-detect-rules.json')

LOG_FILE = 'agentscan.log'
