import logging
from collections import namedtuple

from .errors import ResolutionFailed

logger = logging.getLogger(__name__)

# ``fetch(shortcode)`` returns a MediaCandidate or None, and may raise
Strategy = namedtuple('Strategy', ['name', 'fetch'])


class MediaResolver:
    """Tries each strategy in order and returns the first usable candidate.

    Strategy errors are logged and absorbed; only total exhaustion is reported,
    as ResolutionFailed.
    """

    def __init__(self, strategies):
        self.strategies = list(strategies)

    @property
    def names(self):
        return [strategy.name for strategy in self.strategies]

    def resolve(self, shortcode):
        for strategy in self.strategies:
            logger.info(f"Trying {strategy.name} for shortcode: {shortcode}")
            try:
                candidate = strategy.fetch(shortcode)
            except Exception as e:
                logger.warning(f"{strategy.name} failed: {e}")
                continue

            if candidate is not None and candidate.usable:
                candidate.source = strategy.name
                logger.info(f"Success with {strategy.name}: {candidate.download_url}")
                return candidate

            logger.info(f"{strategy.name} found no media")

        logger.warning(f"All strategies failed for shortcode: {shortcode}")
        raise ResolutionFailed(details=f"Tried: {', '.join(self.names) or 'nothing'}")
