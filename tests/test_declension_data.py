import json
import os
import sysconfig

import pytest

from declension_data import (
    CASES,
    DATA_FILE_NAME,
    DATA_PATH_CANDIDATES,
    GENDERS,
    INSTALL_DIR,
    NUMBERS,
    SOURCE_DATA_PATH,
    DeclensionData,
    default_data_path,
    load_declension_data,
)


def test_bundled_paradigms_are_complete(data):
    assert len(data.paradigms) == 13
    for key, paradigm in data.paradigms.items():
        assert paradigm.key == key
        assert paradigm.gender in GENDERS
        assert paradigm.thematic_ending
        for case in CASES:
            for number in NUMBERS:
                assert paradigm.ending(case, number), f'{key} {case}{number}'


def test_bundled_tags_cover_every_axis_value(data):
    assert set(data.tag_mapping.values()) == set(GENDERS) | set(CASES) | set(NUMBERS)


def test_labels(data):
    labels = data.labels({'gender': 'm', 'case': '3', 'number': 'p'})
    assert labels['en'] == {'gender': 'masculine', 'case': 'instrumental', 'number': 'plural'}
    assert labels['sa']['gender'] == 'पुंल्लिङ्ग'
    assert labels['sa']['case'] == 'तृतीया'


def test_labels_partial_and_empty(data):
    assert data.labels({'case': '8'}) == {'en': {'case': 'vocative'}, 'sa': {'case': 'सम्बोधन'}}
    assert data.labels({}) == {'en': {}, 'sa': {}}
    assert data.labels({'gender': 'x'}) == {'en': {}, 'sa': {}}


def test_data_is_read_only(data):
    with pytest.raises(TypeError):
        data.tag_mapping['x'] = 'm'
    with pytest.raises(TypeError):
        data.paradigms['a_m'].endings['1s'] = 'x'


def test_load_from_env_path(tmp_path, monkeypatch):
    path = tmp_path / 'endings.json'
    path.write_text(json.dumps({
        'paradigms': {'a_m': {'name': 'test', 'gender': 'm', 'thematicEnding': 'a', 'endings': {'1s': 'aH'}}},
    }), encoding='utf-8')
    monkeypatch.setenv('NOMINAL_ENDINGS_PATH', str(path))

    data = load_declension_data()

    assert list(data.paradigms) == ['a_m']
    assert data.paradigms['a_m'].ending('1', 's') == 'aH'
    assert data.paradigms['a_m'].ending('1', 'd') is None
    assert dict(data.tag_mapping) == {}


def test_explicit_path_wins_over_env(tmp_path, monkeypatch):
    monkeypatch.setenv('NOMINAL_ENDINGS_PATH', str(tmp_path / 'missing.json'))
    path = tmp_path / 'endings.json'
    path.write_text('{"paradigms": {}}', encoding='utf-8')
    assert load_declension_data(str(path)) is not None


def test_missing_file(tmp_path):
    assert load_declension_data(str(tmp_path / 'missing.json')) is None


@pytest.mark.parametrize('content', [
    '{not json',
    '[]',
    '{"tagMapping": {}}',
    '{"paradigms": {"a_m": "aH"}}',
    '{"paradigms": {"a_m": {"thematicEnding": null, "endings": {"1s": "aH"}}}}',
    '{"paradigms": {"a_m": {"thematicEnding": "a", "endings": {"1s": 5}}}}',
])
def test_unusable_file(tmp_path, content):
    path = tmp_path / 'endings.json'
    path.write_text(content, encoding='utf-8')
    assert load_declension_data(str(path)) is None


def test_from_dict_defaults():
    data = DeclensionData.from_dict({'paradigms': {'x': {}}})
    paradigm = data.paradigms['x']
    assert paradigm.name == 'x'
    assert paradigm.thematic_ending == ''
    assert dict(paradigm.endings) == {}


@pytest.mark.parametrize('entry', [
    {'thematicEnding': None},
    {'gender': 1},
    {'name': ['a']},
    {'endings': {'1s': None}},
])
def test_from_dict_rejects_non_string_values(entry):
    with pytest.raises(ValueError):
        DeclensionData.from_dict({'paradigms': {'a_m': entry}})


def test_default_data_path_uses_source_checkout():
    assert default_data_path() == SOURCE_DATA_PATH
    assert os.path.isfile(SOURCE_DATA_PATH)


def test_default_data_path_falls_back_to_install_prefix(tmp_path):
    installed = tmp_path.joinpath(*INSTALL_DIR, DATA_FILE_NAME)
    installed.parent.mkdir(parents=True)
    installed.write_text('{"paradigms": {}}', encoding='utf-8')
    candidates = (str(tmp_path / 'checkout' / DATA_FILE_NAME), str(installed))

    assert default_data_path(candidates) == str(installed)
    assert default_data_path(candidates[:1]) == candidates[0]


def test_install_prefix_candidates_match_pyproject():
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    with open(os.path.join(root, 'pyproject.toml'), encoding='utf-8') as f:
        pyproject = f.read()

    assert f'"{"/".join(INSTALL_DIR)}" = ["data/{DATA_FILE_NAME}"]' in pyproject
    installed = os.path.join(sysconfig.get_path('data'), *INSTALL_DIR, DATA_FILE_NAME)
    assert installed in DATA_PATH_CANDIDATES
