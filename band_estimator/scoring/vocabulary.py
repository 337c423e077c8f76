"""
Scoring Vocabularies
band_estimator/scoring/vocabulary.py

Fixed word lists shared by the fallback scorer, the plausibility gate and the
feedback gate. They are hand-tuned heuristics, bundled as one immutable value
built once at import and handed to each component explicitly.

Usage:
    scorer = FallbackScorer(vocabulary=DEFAULT_VOCABULARY)
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class ScoringVocabulary:
    """Immutable bundle of every word list the heuristics consult."""
    linking_words: Tuple[str, ...]
    sophisticated_words: Tuple[str, ...]
    complex_clause_markers: Tuple[str, ...]
    common_errors: Tuple[str, ...]
    advanced_lexical: Tuple[str, ...]
    complex_patterns: Tuple[str, ...]
    generic_feedback: Tuple[str, ...]
    stopwords: Tuple[str, ...]


# ---------------------------------------------------------------------------
# Fallback scorer lists
# ---------------------------------------------------------------------------

LINKING_WORDS = (
    "however", "moreover", "furthermore", "therefore", "consequently",
    "nevertheless", "in addition", "on the other hand", "for example",
    "for instance", "in conclusion", "as a result", "firstly", "secondly",
    "finally", "in contrast", "similarly", "additionally", "thus", "hence",
)

SOPHISTICATED_WORDS = (
    "significant", "substantial", "crucial", "essential", "inevitable",
    "detrimental", "beneficial", "comprehensive", "fundamental", "considerable",
    "predominantly", "subsequently", "alleviate", "exacerbate", "facilitate",
    "undermine", "contemporary", "phenomenon", "perspective", "paramount",
)

COMPLEX_CLAUSE_MARKERS = (
    "although", "even though", "whereas", "unless", "provided that",
    "despite", "in spite of", "not only", "which", "whom", "whose",
    "had it not been", "were it not for", "so that",
)

COMMON_ERRORS = (
    "more better", "most best", "informations", "advices", "peoples",
    "childrens", "he don't", "she don't", "it don't", "could of",
    "should of", "would of", "alot", "discuss about", "an other",
    "less people", "more easier", "return back",
)

# ---------------------------------------------------------------------------
# Plausibility gate lists
# ---------------------------------------------------------------------------

ADVANCED_LEXICAL = (
    "ubiquitous", "paradigm", "juxtapose", "exacerbate", "mitigate",
    "proliferation", "unprecedented", "inextricably", "dichotomy",
    "indispensable", "multifaceted", "pervasive", "detrimental",
    "compelling", "nuanced", "scrutiny", "albeit", "notwithstanding",
)

COMPLEX_PATTERNS = (
    "not only", "but also", "had it not been",
    "were it not for", "no sooner had", "it is widely believed that",
    "it could be argued that", "by the time", "in spite of the fact that",
    "what is more", "were they to",
)

# ---------------------------------------------------------------------------
# Feedback placeholders the model (or an older release) is known to emit
# ---------------------------------------------------------------------------

GENERIC_FEEDBACK = (
    "Your essay demonstrates adequate task response. Focus on improving "
    "coherence with better linking devices and paragraph structure. Expand "
    "vocabulary range and work on grammatical accuracy.",
    "Good essay. Keep practicing to improve your writing skills.",
    "Your essay is well written. Continue practicing to enhance your writing skills.",
    "No feedback available.",
    "Feedback unavailable.",
)


# ---------------------------------------------------------------------------
# Function words ignored when checking for repeated content words
# ---------------------------------------------------------------------------

STOPWORDS = (
    "about", "above", "across", "after", "again", "against", "almost", "along",
    "already", "although", "always", "among", "another", "anyone", "around",
    "because", "become", "before", "being", "below", "between", "beyond",
    "could", "during", "either", "enough", "every", "everyone", "further",
    "having", "however", "itself", "might", "neither", "never", "often",
    "other", "others", "otherwise", "perhaps", "quite", "rather", "really",
    "should", "since", "still", "their", "theirs", "themselves", "there",
    "therefore", "these", "thing", "things", "those", "though", "through",
    "throughout", "together", "towards", "under", "until", "upon", "where",
    "whether", "which", "while", "whilst", "whose", "within", "without",
    "would", "yours",
)

DEFAULT_VOCABULARY = ScoringVocabulary(
    linking_words=LINKING_WORDS,
    sophisticated_words=SOPHISTICATED_WORDS,
    complex_clause_markers=COMPLEX_CLAUSE_MARKERS,
    common_errors=COMMON_ERRORS,
    advanced_lexical=ADVANCED_LEXICAL,
    complex_patterns=COMPLEX_PATTERNS,
    generic_feedback=GENERIC_FEEDBACK,
    stopwords=STOPWORDS,
)


@lru_cache(maxsize=512)
def _term_pattern(term: str) -> "re.Pattern[str]":
    words = [re.escape(w) for w in term.lower().split()]
    return re.compile(r"(?<![a-z])" + r"\s+".join(words) + r"(?![a-z])")


def matched_terms(text: str, terms: Iterable[str]) -> List[str]:
    """Distinct terms that occur in text as whole words, case-insensitively."""
    lowered = text.lower()
    return [term for term in terms if _term_pattern(term).search(lowered)]


def count_occurrences(text: str, terms: Iterable[str]) -> int:
    """Total occurrences of all terms in text, case-insensitively."""
    lowered = text.lower()
    return sum(len(_term_pattern(term).findall(lowered)) for term in terms)
