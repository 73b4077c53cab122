"""
strategies.py — The three ways a required label can match an upload.

Tried in priority order until one fires:

  1. Direct substring: "pan card" inside "my pan card scan.pdf"
  2. Keyword table: "Aadhar" and "uid_proof.pdf" both belong to AADHAR
  3. Word overlap: "Experience Certificates" vs "project_experience.pdf"

All three work on normalised text (see normalize()). They are heuristics
tuned for recall: a bidder who uploads the right document under a sloppy
file name should not be blocked, and a human evaluator reviews every bid
anyway. False positives ("clearance" matching an unrelated clearance
letter) are the accepted cost.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from tender_validation.config import MatchingConfig, config
from tender_validation.keywords import DEFAULT_KEYWORD_TABLE, KeywordTable

_SEPARATORS = re.compile(r"[_\-]+")


def normalize(value: Optional[str]) -> str:
    """
    Lower-case, turn _ and - into spaces, collapse whitespace.

    File names use underscores and hyphens where labels use spaces, so
    "My_PAN-Card.pdf" and "PAN Card" need to meet in the middle.
    """
    if not value:
        return ""
    return " ".join(_SEPARATORS.sub(" ", str(value).lower()).split())


@dataclass(frozen=True)
class StrategyHit:
    strategy: str
    keyword: Optional[str] = None


class MatchStrategy:
    """One matching rule. Inputs are already normalised."""

    name: str = "base"

    def attempt(self, required: str, candidate: str) -> Optional[StrategyHit]:
        raise NotImplementedError


class DirectSubstringStrategy(MatchStrategy):
    name = "direct_substring"

    def attempt(self, required: str, candidate: str) -> Optional[StrategyHit]:
        if required and required in candidate:
            return StrategyHit(self.name, required)
        return None


class KeywordTableStrategy(MatchStrategy):
    """
    Category-level match through the keyword table.

    The label is classified into every category it mentions; the candidate
    matches if it contains any keyword of one of those categories. That is
    what lets "Aadhar" find "uid_proof.pdf" even though the two strings
    share no keyword literally.
    """
    name = "keyword_table"

    def __init__(self, keyword_table: KeywordTable = DEFAULT_KEYWORD_TABLE):
        self.keyword_table = keyword_table

    def attempt(self, required: str, candidate: str) -> Optional[StrategyHit]:
        if not required or not candidate:
            return None
        for category in self.keyword_table.classify(required):
            for keyword in self.keyword_table.keywords(category):
                if keyword in candidate:
                    return StrategyHit(self.name, keyword)
        return None


class WordOverlapStrategy(MatchStrategy):
    """Any sufficiently long token of the label found in the candidate."""
    name = "word_overlap"

    def __init__(self, settings: MatchingConfig = config.matching):
        self.min_token_length = settings.min_token_length
        self._split = re.compile(settings.token_split_pattern)

    def attempt(self, required: str, candidate: str) -> Optional[StrategyHit]:
        for token in self._split.split(required):
            if len(token) > self.min_token_length and token in candidate:
                return StrategyHit(self.name, token)
        return None


def default_strategies(
    keyword_table: KeywordTable = DEFAULT_KEYWORD_TABLE,
    settings: MatchingConfig = config.matching,
) -> List[MatchStrategy]:
    return [
        DirectSubstringStrategy(),
        KeywordTableStrategy(keyword_table),
        WordOverlapStrategy(settings),
    ]
