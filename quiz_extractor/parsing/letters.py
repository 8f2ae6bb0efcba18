"""Answer-letter normalisation shared by the parser, prompts and exports."""

import re

# Letters are recognised further than the four options a quiz may carry so an
# out-of-range answer ("Correct Answer: e)") can be reported instead of being
# mistaken for option text.
LATIN_LETTERS = "abcdefgh"
ARABIC_LETTERS = "أبجدهوزح"  # abjad order
MAX_CHOICES = 4

ALEF_VARIANTS = "اإآ"
_ALEF_MAP = {variant: "أ" for variant in ALEF_VARIANTS}

# Character classes for use inside regular expressions
LATIN_CHOICE_CLASS = "a-dA-D"
LATIN_ANSWER_CLASS = "a-hA-H"
ARABIC_CHOICE_CLASS = ARABIC_LETTERS[:MAX_CHOICES] + ALEF_VARIANTS
ARABIC_ANSWER_CLASS = ARABIC_LETTERS + ALEF_VARIANTS

_INVISIBLE = re.compile("[\ufeff\u200b-\u200f\u202a-\u202e\u2066-\u2069]")
_ARABIC_SCRIPT = re.compile("[\u0600-\u06ff]")


def normalize_letter(letter: str) -> str:
    """Lower-case a Latin letter and fold alef variants onto أ."""
    letter = letter.strip().lower()
    return _ALEF_MAP.get(letter, letter)


def letter_to_index(letter: str) -> int:
    """
    Map an answer letter to a zero-based option index.

    a/أ -> 0, b/ب -> 1, c/ج -> 2, d/د -> 3, continuing through h/ح -> 7.

    Args:
        letter: A single Latin or Arabic letter

    Returns:
        The index, or -1 for anything that is not an answer letter
    """
    letter = normalize_letter(letter)
    if len(letter) != 1:
        return -1
    if letter in LATIN_LETTERS:
        return LATIN_LETTERS.index(letter)
    if letter in ARABIC_LETTERS:
        return ARABIC_LETTERS.index(letter)
    return -1


def is_valid_choice(index: int) -> bool:
    """True if the index addresses one of the four allowed options."""
    return 0 <= index < MAX_CHOICES


def index_to_letter(index: int, arabic: bool = False) -> str:
    """Inverse of letter_to_index for display ("a".."h" or "أ".."ح")."""
    letters = ARABIC_LETTERS if arabic else LATIN_LETTERS
    if not 0 <= index < len(letters):
        raise ValueError(f"No answer letter for index {index}")
    return letters[index]


def strip_invisible(text: str) -> str:
    """Remove BOM, zero-width and bidi control characters."""
    return _INVISIBLE.sub("", text)


def contains_arabic(text: str) -> bool:
    """True if the text contains any Arabic-script character."""
    return bool(_ARABIC_SCRIPT.search(text))
