"""Exception hierarchy for the gift ranking engine"""


class GiftRankError(Exception):
    """Base exception for all gift ranking errors"""


class CorpusLoadError(GiftRankError):
    """The gift catalogue could not be read or parsed"""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path
