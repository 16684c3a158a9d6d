"""
Declension table generator for Sanskrit nominals
Generates all 24 forms (8 cases x 3 numbers) for an SLP1 stem
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

from declension_data import CASES, GENDERS, NUMBERS, DeclensionData

logger = logging.getLogger(__name__)

# Marker for cells the paradigm defines no form for
NO_FORM = '—'

# Thematic endings checked against the end of the stem, in priority order.
# The nasal-final cluster goes first so that 'an' stems are not read as 'a'.
ENDING_PRIORITY = ('an', 'a', 'A', 'i', 'I', 'u', 'U', 'f')

# Paradigm used when the stem ending selects nothing for the gender
DEFAULT_PARADIGMS = MappingProxyType({
    'm': 'a_m',
    'n': 'a_n',
    'f': 'A_f',
})

AXIS_VALUES = MappingProxyType({
    'gender': frozenset(GENDERS),
    'number': frozenset(NUMBERS),
    'case': frozenset(CASES),
})


@dataclass(frozen=True)
class DeclensionTable:
    """All 24 forms of one stem; forms[case][number] is a form or NO_FORM"""

    stem: str
    bare_stem: str
    gender: str
    paradigm_key: str
    paradigm_name: str
    forms: Mapping[str, Mapping[str, str]]

    success = True

    def form(self, case: str, number: str) -> str:
        return self.forms[case][number]

    def cells(self) -> Iterator[Tuple[str, str, str]]:
        """(case, number, form) in case-major, number-minor order"""
        for case in CASES:
            for number in NUMBERS:
                yield case, number, self.forms[case][number]

    def to_dict(self) -> Dict:
        return {
            'success': True,
            'stem': self.stem,
            'bare_stem': self.bare_stem,
            'gender': self.gender,
            'paradigm': self.paradigm_key,
            'paradigm_name': self.paradigm_name,
            'forms': {case: dict(numbers) for case, numbers in self.forms.items()},
        }


@dataclass(frozen=True)
class DeclensionError:
    """Returned instead of a table when no table can be built"""

    error: str
    stem: Optional[str] = None
    gender: Optional[str] = None
    paradigm_key: Optional[str] = None

    success = False

    def to_dict(self) -> Dict:
        return {
            'success': False,
            'error': self.error,
            'stem': self.stem,
            'gender': self.gender,
            'paradigm': self.paradigm_key,
        }


class DeclensionEngine:
    """
    Paradigm detection and table generation over loaded paradigm data

    The engine holds nothing but the immutable data it is given, so one
    instance can be shared freely. With data=None every operation returns
    its failure value.
    """

    def __init__(self, data: Optional[DeclensionData]):
        self.data = data
        self._paradigm_by_ending = self._index_paradigms(data)

    @staticmethod
    def _index_paradigms(data: Optional[DeclensionData]) -> Mapping[Tuple[str, str], str]:
        """(thematic ending, gender) -> paradigm key, first paradigm wins"""
        index = {}
        if data is not None:
            for key, paradigm in data.paradigms.items():
                if paradigm.thematic_ending and paradigm.gender in GENDERS:
                    index.setdefault((paradigm.thematic_ending, paradigm.gender), key)
        return MappingProxyType(index)

    def detect_paradigm(self, stem: str, gender: str) -> Optional[str]:
        """
        Detect the paradigm from the stem ending and gender

        Args:
            stem: Stem in SLP1, e.g. 'rAma', 'rAjan', 'nadI'
            gender: 'm', 'f' or 'n'

        Returns:
            Paradigm key like 'a_m' or 'A_f', or None for an empty stem, an
            unknown gender or missing data
        """
        if not stem or not isinstance(stem, str) or gender not in GENDERS or self.data is None:
            return None

        for ending in ENDING_PRIORITY:
            if stem.endswith(ending):
                key = self._paradigm_by_ending.get((ending, gender))
                if key:
                    return key
                break

        # Most common paradigm for the gender
        return DEFAULT_PARADIGMS[gender]

    def bare_stem(self, stem: str, paradigm_key: str) -> str:
        """Strip the paradigm's thematic ending, if the stem actually ends with it"""
        if not isinstance(stem, str):
            return ''
        if not stem or not isinstance(paradigm_key, str) or self.data is None:
            return stem

        paradigm = self.data.paradigms.get(paradigm_key)
        to_strip = paradigm.thematic_ending if paradigm else ''
        if to_strip and stem.endswith(to_strip):
            return stem[:-len(to_strip)]
        return stem

    def build_table(self, stem: str, gender: str,
                    paradigm_key: Optional[str] = None) -> Union[DeclensionTable, DeclensionError]:
        """
        Generate all 24 forms of a noun

        Forms are the bare stem followed by the paradigm ending; no sandhi is
        applied at the boundary.

        Args:
            stem: Stem in SLP1
            gender: 'm', 'f' or 'n'
            paradigm_key: Force a specific paradigm instead of detecting one

        Returns:
            DeclensionTable, or DeclensionError describing why none was built
        """
        if self.data is None:
            return DeclensionError('Declension data is not available', stem, gender, paradigm_key)
        if not stem or not isinstance(stem, str):
            return DeclensionError('No stem given', stem, gender, paradigm_key)
        if gender not in GENDERS:
            return DeclensionError(f'Unknown gender {gender!r}', stem, gender, paradigm_key)
        if paradigm_key is not None and not isinstance(paradigm_key, str):
            return DeclensionError(f'Unknown paradigm {paradigm_key!r}', stem, gender, None)

        paradigm_key = paradigm_key or self.detect_paradigm(stem, gender)
        paradigm = self.data.paradigms.get(paradigm_key)
        if paradigm is None:
            logger.debug("No paradigm %r for %s (%s)", paradigm_key, stem, gender)
            return DeclensionError(f'Unknown stem type for {stem} ({gender})', stem, gender, paradigm_key)

        bare = self.bare_stem(stem, paradigm_key)
        forms = {}
        for case in CASES:
            row = {}
            for number in NUMBERS:
                ending = paradigm.ending(case, number)
                row[number] = bare + ending if ending else NO_FORM
            forms[case] = MappingProxyType(row)

        return DeclensionTable(
            stem=stem,
            bare_stem=bare,
            gender=gender,
            paradigm_key=paradigm_key,
            paradigm_name=paradigm.name,
            forms=MappingProxyType(forms),
        )

    def decode_tags(self, tags: Optional[Sequence[str]]) -> Dict[str, str]:
        """
        Decode analyser tags into {gender, case, number}

        The first tag seen for an axis wins; later tags for the same axis are
        ignored. Unknown tags are skipped.
        """
        info = {}
        if self.data is None or not tags:
            return info

        for tag in tags:
            value = self.data.tag_mapping.get(tag) if isinstance(tag, str) else None
            if not value:
                continue
            for axis, values in AXIS_VALUES.items():
                if value in values:
                    info.setdefault(axis, value)
                    break

        return info

    @staticmethod
    def locate(table: Union[DeclensionTable, DeclensionError, None],
               form: str) -> Optional[Dict[str, str]]:
        """Find the first cell (case-major order) whose form is exactly `form`"""
        if not isinstance(table, DeclensionTable) or not form or form == NO_FORM:
            return None

        for case, number, cell in table.cells():
            if cell == form:
                return {'case': case, 'number': number}

        return None
