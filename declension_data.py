"""
Paradigm and grammatical-tag data for the declension engine

Loads data/nominal-endings.json once into read-only structures. The file
location can be overridden with the NOMINAL_ENDINGS_PATH environment variable.
"""

import json
import logging
import os
import site
import sysconfig
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

DATA_FILE_NAME = 'nominal-endings.json'

# Where pyproject.toml installs the data file, relative to the install prefix
INSTALL_DIR = ('share', 'sanskrit-learner')

SOURCE_DATA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', DATA_FILE_NAME)

# Source checkout or editable install first, then the system and user install prefixes
DATA_PATH_CANDIDATES = (SOURCE_DATA_PATH,) + tuple(
    os.path.join(prefix, *INSTALL_DIR, DATA_FILE_NAME)
    for prefix in (sysconfig.get_path('data'), site.USER_BASE)
    if prefix
)

GENDERS = ('m', 'f', 'n')
CASES = ('1', '2', '3', '4', '5', '6', '7', '8')
NUMBERS = ('s', 'd', 'p')


@dataclass(frozen=True)
class Paradigm:
    """One declension paradigm: endings keyed by case digit + number letter"""

    key: str
    name: str
    gender: str
    thematic_ending: str
    endings: Mapping[str, str]

    def ending(self, case: str, number: str) -> Optional[str]:
        return self.endings.get(f'{case}{number}') or None


@dataclass(frozen=True)
class DeclensionData:
    """
    Immutable view of the paradigm/label document

    Attributes:
        paradigms: paradigm key -> Paradigm
        tag_mapping: analyser tag string -> 'm'|'f'|'n', 's'|'d'|'p' or '1'..'8'
        gender_names, case_names, number_names: code -> {'en': ..., 'sa': ...}
    """

    paradigms: Mapping[str, Paradigm]
    tag_mapping: Mapping[str, str]
    gender_names: Mapping[str, Mapping[str, str]]
    case_names: Mapping[str, Mapping[str, str]]
    number_names: Mapping[str, Mapping[str, str]]

    @classmethod
    def from_dict(cls, raw: Dict) -> 'DeclensionData':
        """Build from the decoded JSON document; raises ValueError when malformed"""
        if not isinstance(raw, dict) or not isinstance(raw.get('paradigms'), dict):
            raise ValueError("declension data has no 'paradigms' table")

        paradigms = {}
        for key, entry in raw['paradigms'].items():
            if not isinstance(entry, dict) or not isinstance(entry.get('endings', {}), dict):
                raise ValueError(f"paradigm {key!r} is malformed")

            fields = {name: entry.get(name, '') for name in ('gender', 'thematicEnding')}
            fields['name'] = entry.get('name', key)
            endings = entry.get('endings', {})
            bad = [name for name, value in fields.items() if not isinstance(value, str)]
            bad += [code for code, value in endings.items() if not isinstance(value, str)]
            if bad:
                raise ValueError(f"paradigm {key!r} has non-string values for {', '.join(bad)}")

            paradigms[key] = Paradigm(
                key=key,
                name=fields['name'],
                gender=fields['gender'],
                thematic_ending=fields['thematicEnding'],
                endings=MappingProxyType(dict(endings)),
            )

        tag_mapping = raw.get('tagMapping', {})
        if not isinstance(tag_mapping, dict) or not all(isinstance(v, str) for v in tag_mapping.values()):
            raise ValueError("tagMapping must map tags to strings")

        return cls(
            paradigms=MappingProxyType(paradigms),
            tag_mapping=MappingProxyType(dict(tag_mapping)),
            gender_names=_freeze_names(raw.get('genderNames', {})),
            case_names=_freeze_names(raw.get('caseNames', {})),
            number_names=_freeze_names(raw.get('numberNames', {})),
        )

    def labels(self, info: Mapping[str, str]) -> Dict[str, Dict[str, str]]:
        """Human-readable English and Sanskrit labels for a {gender, case, number} record"""
        labels = {'en': {}, 'sa': {}}
        if not info:
            return labels

        for axis, names in (('gender', self.gender_names), ('case', self.case_names), ('number', self.number_names)):
            name = names.get(info.get(axis) or '')
            if name:
                labels['en'][axis] = name.get('en', '')
                labels['sa'][axis] = name.get('sa', '')

        return labels


def _freeze_names(names: Dict) -> Mapping[str, Mapping[str, str]]:
    return MappingProxyType({code: MappingProxyType(dict(label)) for code, label in names.items()})


def default_data_path(candidates=DATA_PATH_CANDIDATES) -> str:
    """First candidate data file that exists, else the source checkout path"""
    for candidate in candidates:
        if os.path.isfile(candidate):
            return candidate
    return candidates[0]


def load_declension_data(path: Optional[str] = None) -> Optional[DeclensionData]:
    """
    Load the paradigm/label document

    Args:
        path: JSON file; defaults to $NOMINAL_ENDINGS_PATH, then the bundled or installed file

    Returns:
        DeclensionData, or None when the file is missing or unusable
    """
    path = path or os.getenv('NOMINAL_ENDINGS_PATH') or default_data_path()

    try:
        with open(path, encoding='utf-8') as f:
            data = DeclensionData.from_dict(json.load(f))
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Could not load declension data from %s: %s", path, e)
        return None

    logger.info("Loaded %d paradigms and %d tags from %s", len(data.paradigms), len(data.tag_mapping), path)
    return data
