STOP_WORDS = frozenset(
    {"the", "a", "an", "of", "and", "in", "for", "on", "at", "by", "to", "with"}
)
MIN_KEYWORD_LENGTH = 4


def extract_keywords(description: str) -> list[str]:
    """Lowercased words of a job description worth matching against CVs.

    Stop words and words shorter than four characters are dropped. Repeats
    are kept, so a word stressed several times weighs more in ranking.
    """
    words = (word.lower() for word in (description or "").split())
    return [
        word
        for word in words
        if word not in STOP_WORDS and len(word) >= MIN_KEYWORD_LENGTH
    ]
