import threading

from crawlerdetect import CrawlerDetect


class CrawlerMatcher(object):
    """Tells crawlers apart using the crawlerdetect signature list.

    CrawlerDetect keeps the matches of its last call, so every thread gets
    its own instance.
    """

    def __init__(self):
        self._local = threading.local()

    def detector(self):
        detector = getattr(self._local, 'detector', None)
        if detector is None:
            detector = CrawlerDetect()
            self._local.detector = detector
        return detector

    def is_crawler(self, user_agent):
        if not user_agent:
            return False
        return bool(self.detector().isCrawler(user_agent))

    def matched_name(self, user_agent):
        """Name of the crawler signature found in user_agent, or None"""

        if not self.is_crawler(user_agent):
            return None
        return self.detector().getMatches() or None
