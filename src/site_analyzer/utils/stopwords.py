# src/site_analyzer/utils/stopwords.py
import functools

STOPWORDS_EN = {
    "a", "about", "above", "after", "again", "against", "all", "am", "an", "and", "any", "are", "as", "at", "be",
    "because", "been", "before", "being", "below", "between", "both", "but", "by", "can", "could", "did", "do", "does",
    "doing", "down", "during", "each", "few", "for", "from", "further", "had", "has", "have", "having", "he", "her",
    "here", "hers", "him", "his", "how", "i", "if", "in", "into", "is", "it", "its", "itself", "just", "me", "more",
    "most", "my", "myself", "no", "nor", "not", "of", "off", "on", "once", "only", "or", "other", "our", "ours",
    "ourselves", "out", "over", "own", "same", "she", "should", "so", "some", "such", "than", "that", "the", "their",
    "theirs", "them", "themselves", "then", "there", "these", "they", "this", "those", "through", "to", "too", "under",
    "until", "up", "very", "was", "we", "were", "what", "when", "where", "which", "while", "who", "whom", "why", "with",
    "you", "your", "yours", "yourself", "yourselves", "say", "would", "will", "also"
}

# Filler words that carry no topical signal when comparing page vocabularies
STOPWORDS_CONTENT = {
    "one", "day", "get", "may", "new", "now", "old", "see", "two", "way", "boy", "use", "many", "make", "like",
    "time", "look", "know", "first", "back", "want", "good", "much", "come", "long", "take", "well", "even",
    "every", "still", "need", "help", "find", "made", "best", "year", "years"
}

GENERIC_ALT_WORDS = {
    "", "image", "img", "photo", "picture", "logo", "icon", "graphic"
}

QUESTION_WORDS = (
    "what", "why", "how", "when", "where", "who", "which",
    "can", "do", "does", "is", "are", "will", "should"
)


def combine_stopwords(func):
    """Decorator that injects the combined stop word set when the caller passes none."""
    @functools.wraps(func)
    def wrapper(text, stopwords=None, *args, **kwargs):
        if stopwords is None:
            stopwords = STOPWORDS_EN.union(STOPWORDS_CONTENT)
        return func(text, stopwords, *args, **kwargs)
    return wrapper
