"""kanjisrs: spaced-repetition scheduling and answer checking for Japanese study."""

from kanjisrs.consts import VERSION

__version__ = VERSION
