"""Text normalization utilities."""

# Articles, prepositions and conjunctions (English and Portuguese) kept
# lowercase in the middle of a name.
STOP_WORDS = frozenset({
    # English
    "a", "an", "and", "as", "at", "but", "by", "en", "for", "if", "in",
    "nor", "of", "on", "or", "per", "the", "to", "v", "v.", "vs", "vs.", "via",
    # Portuguese
    "o", "os", "um", "uns", "uma", "umas", "de", "do", "da", "dos", "das",
    "em", "na", "no", "nas", "nos", "por", "para", "e", "ou",
})


def _capitalize(word: str) -> str:
    head = word[:1].upper()
    # Characters such as "ß" expand when uppercased
    if len(head) != len(word[:1]):
        head = word[:1]
    return head + word[1:].lower()


def normalize_name(text: str) -> str:
    """
    Title-case a free-text name the way it is stored.

    - Words are split on single spaces
    - Each word gets an uppercase first letter, the rest lowercase
    - Stop words stay lowercase unless first or last

    "MC KEVIN DA SILVA" -> "Mc Kevin da Silva"
    "the end of the road" -> "The End of the Road"
    """
    if not text:
        return ""

    words = text.split(" ")
    last = len(words) - 1

    normalized = []
    for index, word in enumerate(words):
        if 0 < index < last and word.lower() in STOP_WORDS:
            normalized.append(word.lower())
        else:
            normalized.append(_capitalize(word))

    return " ".join(normalized)


def normalize_names(names: list[str]) -> list[str]:
    """Normalize every name in a list, keeping order."""
    return [normalize_name(name) for name in names]


def clean_names(names: list[str]) -> list[str]:
    """Strip and normalize names from a form, dropping blank entries."""
    return [normalize_name(name.strip()) for name in names if name and name.strip()]
