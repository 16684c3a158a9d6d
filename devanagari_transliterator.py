"""
SLP1 <-> Devanagari transliterator

SLP1 is a lossless one-letter-per-phoneme ASCII encoding for Sanskrit,
used by most Sanskrit analysis APIs.
"""

import re
from types import MappingProxyType
from typing import List

# SLP1 independent vowels to Devanagari
INDEPENDENT_VOWELS = MappingProxyType({
    'a': 'अ', 'A': 'आ', 'i': 'इ', 'I': 'ई', 'u': 'उ', 'U': 'ऊ',
    'f': 'ऋ', 'F': 'ॠ', 'x': 'ऌ', 'X': 'ॡ',
    'e': 'ए', 'E': 'ऐ', 'o': 'ओ', 'O': 'औ'
})

# SLP1 vowels to Devanagari vowel signs (mātrā), only used after a consonant
VOWEL_SIGNS = MappingProxyType({
    'A': 'ा', 'i': 'ि', 'I': 'ी', 'u': 'ु', 'U': 'ू',
    'f': 'ृ', 'F': 'ॄ', 'x': 'ॢ', 'X': 'ॣ',
    'e': 'े', 'E': 'ै', 'o': 'ो', 'O': 'ौ'
})

# SLP1 consonants to Devanagari
CONSONANTS = MappingProxyType({
    # Velars
    'k': 'क', 'K': 'ख', 'g': 'ग', 'G': 'घ', 'N': 'ङ',
    # Palatals
    'c': 'च', 'C': 'छ', 'j': 'ज', 'J': 'झ', 'Y': 'ञ',
    # Retroflexes
    'w': 'ट', 'W': 'ठ', 'q': 'ड', 'Q': 'ढ', 'R': 'ण',
    # Dentals
    't': 'त', 'T': 'थ', 'd': 'द', 'D': 'ध', 'n': 'न',
    # Labials
    'p': 'प', 'P': 'फ', 'b': 'ब', 'B': 'भ', 'm': 'म',
    # Semivowels
    'y': 'य', 'r': 'र', 'l': 'ल', 'v': 'व',
    # Sibilants
    'S': 'श', 'z': 'ष', 's': 'स',
    # Aspirate
    'h': 'ह'
})

VIRAMA = '्'

# Anusvara, visarga, candrabindu, avagraha and punctuation
SPECIAL = MappingProxyType({
    'M': 'ं',   # Anusvara
    'H': 'ः',   # Visarga
    '~': 'ँ',   # Candrabindu
    "'": 'ऽ',   # Avagraha
    '.': '।',   # Danda
    '..': '॥',  # Double danda
})

DIGITS = MappingProxyType({
    '0': '०', '1': '१', '2': '२', '3': '३', '4': '४',
    '5': '५', '6': '६', '7': '७', '8': '८', '9': '९'
})


def _build_reverse_table():
    reverse = {}
    for table in (INDEPENDENT_VOWELS, CONSONANTS, SPECIAL, VOWEL_SIGNS, DIGITS):
        for slp1, dev in table.items():
            if dev in reverse:
                raise ValueError(f"Devanagari glyph {dev!r} mapped twice")
            reverse[dev] = slp1
    reverse[VIRAMA] = ''
    return MappingProxyType(reverse)


# Devanagari to SLP1, the structural inverse of the tables above
DEVANAGARI_TO_SLP1 = _build_reverse_table()

_DEVANAGARI_RE = re.compile(r'[\u0900-\u097F]+')
_PUNCTUATION_RE = re.compile(r'[।॥\s,.;:!?\'"()\[\]{}]')


def is_consonant(char: str) -> bool:
    """Consonant block क (U+0915) .. ह (U+0939)"""
    return '\u0915' <= char <= '\u0939'


def is_vowel_sign(char: str) -> bool:
    """Dependent vowel signs U+093E..U+094C and U+0962..U+0963"""
    return '\u093E' <= char <= '\u094C' or '\u0962' <= char <= '\u0963'


def slp1_to_devanagari(text: str) -> str:
    """
    Convert SLP1 text to Devanagari

    Consonants followed by 'a' keep their inherent vowel, consonants followed
    by another vowel take its mātrā, and any other consonant gets a virama.
    Characters with no SLP1 meaning pass through unchanged.

    Args:
        text: SLP1 text

    Returns:
        Devanagari text
    """
    if not text:
        return ''

    result = []
    i = 0

    while i < len(text):
        char = text[i]

        # Double danda takes priority over a single danda
        if text.startswith('..', i):
            result.append(SPECIAL['..'])
            i += 2
            continue

        if char in CONSONANTS:
            result.append(CONSONANTS[char])
            next_char = text[i + 1] if i + 1 < len(text) else ''

            if next_char == 'a':
                # Inherent 'a' - nothing to add
                i += 2
            elif next_char and next_char in VOWEL_SIGNS:
                result.append(VOWEL_SIGNS[next_char])
                i += 2
            else:
                # End of text or followed by a non-vowel
                result.append(VIRAMA)
                i += 1
            continue

        # Word-initial vowel or vowel after another vowel
        if char in INDEPENDENT_VOWELS:
            result.append(INDEPENDENT_VOWELS[char])
        elif char in SPECIAL:
            result.append(SPECIAL[char])
        elif char in DIGITS:
            result.append(DIGITS[char])
        else:
            result.append(char)
        i += 1

    return ''.join(result)


def devanagari_to_slp1(text: str) -> str:
    """
    Convert Devanagari text to SLP1

    Args:
        text: Devanagari text

    Returns:
        SLP1 transliteration; unmapped characters are kept as they are
    """
    if not text:
        return ''

    result = []
    i = 0

    while i < len(text):
        char = text[i]
        slp1 = DEVANAGARI_TO_SLP1.get(char)

        if slp1 is None:
            result.append(char)
            i += 1
            continue

        if is_consonant(char):
            result.append(slp1)
            next_char = text[i + 1] if i + 1 < len(text) else ''

            if next_char == VIRAMA:
                i += 2
            elif is_vowel_sign(next_char) and next_char in DEVANAGARI_TO_SLP1:
                result.append(DEVANAGARI_TO_SLP1[next_char])
                i += 2
            else:
                # No virama, no vowel sign = inherent 'a'
                result.append('a')
                i += 1
            continue

        # A stray virama has nothing to contribute; everything else maps 1:1
        result.append(slp1)
        i += 1

    return ''.join(result)


encode = devanagari_to_slp1
decode = slp1_to_devanagari


def contains_devanagari(text: str) -> bool:
    """True if any character lies in the Devanagari block U+0900..U+097F"""
    if not text:
        return False
    return _DEVANAGARI_RE.search(text) is not None


def extract_devanagari_words(text: str) -> List[str]:
    """All maximal runs of Devanagari characters, in order"""
    if not text:
        return []
    return _DEVANAGARI_RE.findall(text)


def clean_devanagari_word(word: str) -> str:
    """Remove dandas, whitespace and common ASCII punctuation from a word"""
    if not word:
        return ''
    return _PUNCTUATION_RE.sub('', word).strip()
