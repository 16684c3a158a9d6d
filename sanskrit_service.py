"""
Sanskrit learner service
Combines transliteration and declension for words picked up by the reader UI,
and exposes both as a small JSON API and a command line tool
"""

import logging
import os
import sys
from typing import Dict, List, Optional, Sequence

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from declension import NO_FORM, DeclensionEngine
from declension_data import load_declension_data
from devanagari_transliterator import (
    clean_devanagari_word,
    contains_devanagari,
    devanagari_to_slp1,
    extract_devanagari_words,
    slp1_to_devanagari,
)

# Load .env file for local development
load_dotenv()

logger = logging.getLogger(__name__)

# Number of alternative analyses reported next to the chosen one
MAX_ALTERNATIVES = 3

app = Flask(__name__)


class SanskritLearner:
    """
    Call-site composition of the transliterator and the declension engine
    """

    def __init__(self, data_path: Optional[str] = None):
        """
        Args:
            data_path: Paradigm JSON file, defaults to $NOMINAL_ENDINGS_PATH or the bundled one
        """
        self.data = load_declension_data(data_path)
        self.engine = DeclensionEngine(self.data)

    def detect_script(self, text: str) -> str:
        """Detect if input is Devanagari or SLP1"""
        return 'Devanagari' if contains_devanagari(text) else 'SLP1'

    def to_slp1(self, text: str) -> str:
        """First word of a selection in either script -> cleaned SLP1"""
        if not isinstance(text, str):
            return ''
        if contains_devanagari(text):
            words = [w for w in map(clean_devanagari_word, extract_devanagari_words(text)) if w]
            return devanagari_to_slp1(words[0]) if words else ''
        words = text.split()
        return words[0] if words else ''

    def transliterate(self, text: str) -> Dict:
        """Convert text to the other script, reporting both"""
        script = self.detect_script(text)
        if script == 'Devanagari':
            slp1, devanagari = devanagari_to_slp1(text), text
        else:
            slp1, devanagari = text, slp1_to_devanagari(text)

        return {
            'success': True,
            'input': text,
            'script': script,
            'slp1': slp1,
            'devanagari': devanagari,
            'words': [w for w in map(clean_devanagari_word, extract_devanagari_words(devanagari)) if w],
        }

    def declension(self, stem: str, gender: str, paradigm: Optional[str] = None,
                   form: Optional[str] = None) -> Dict:
        """
        Full declension table for a stem in either script

        Args:
            stem: Stem in Devanagari or SLP1
            gender: 'm', 'f' or 'n'
            paradigm: Force a specific paradigm key
            form: Optional form to locate in the table

        Returns:
            Table as a dict with SLP1 and Devanagari forms, or an error dict
        """
        table = self.engine.build_table(self.to_slp1(stem), gender, paradigm)
        if not table.success:
            return table.to_dict()

        result = table.to_dict()
        result['stem_devanagari'] = slp1_to_devanagari(table.stem)
        result['forms_devanagari'] = {
            case: {number: NO_FORM if f == NO_FORM else slp1_to_devanagari(f) for number, f in numbers.items()}
            for case, numbers in table.forms.items()
        }
        result['labels'] = self.data.labels({'gender': gender})
        result['case_names'] = {code: dict(names) for code, names in self.data.case_names.items()}
        result['number_names'] = {code: dict(names) for code, names in self.data.number_names.items()}

        if form:
            result['located'] = self.engine.locate(table, self.to_slp1(form))

        return result

    def analyze(self, word: str, analyses: Sequence) -> Dict:
        """
        Grammatical summary of a word from the external analyser's candidates

        Args:
            word: The word as selected by the reader, either script
            analyses: Candidate analyses [[stem, [tag, ...]], ...]; the first one is used

        Returns:
            Decoded grammar, labels, declension table and alternatives
        """
        if not analyses:
            return {'success': False, 'word': word, 'error': 'No analysis available for this word'}

        first = analyses[0]
        if not isinstance(first, (list, tuple)) or len(first) < 2 or not isinstance(first[1], (list, tuple)):
            return {'success': False, 'word': word, 'error': 'Could not parse analysis'}

        stem, tags = first[0], first[1]
        if stem is not None and not isinstance(stem, str):
            return {'success': False, 'word': word, 'error': 'Could not parse analysis'}

        info = self.engine.decode_tags(tags)

        result = {
            'success': True,
            'word': word,
            'word_slp1': self.to_slp1(word),
            'stem': stem,
            'grammar': info,
            'labels': self.data.labels(info) if self.data else {'en': {}, 'sa': {}},
            'alternatives': self._alternatives(analyses[1:MAX_ALTERNATIVES + 1]),
        }

        # Only nominals with a known gender get a table
        if stem and info.get('gender'):
            table = self.declension(stem, info['gender'], form=word)
            if table.get('success') and info.get('case') and info.get('number'):
                table['highlight'] = {'case': info['case'], 'number': info['number']}
            result['declension'] = table

        return result

    @staticmethod
    def _alternatives(candidates: Sequence) -> List[Dict]:
        alternatives = []
        for candidate in candidates:
            if (isinstance(candidate, (list, tuple)) and len(candidate) >= 2
                    and isinstance(candidate[1], (list, tuple))):
                alternatives.append({'stem': candidate[0], 'tags': list(candidate[1])[:3]})
        return alternatives

    def paradigms(self) -> Dict:
        """Available paradigms"""
        if self.data is None:
            return {'success': False, 'error': 'Declension data is not available'}
        return {
            'success': True,
            'paradigms': [
                {'key': p.key, 'name': p.name, 'gender': p.gender, 'thematic_ending': p.thematic_ending}
                for p in self.data.paradigms.values()
            ],
        }


# Initialize learner
learner = SanskritLearner()


def _cors(response):
    response.headers.add('Access-Control-Allow-Origin', '*')
    return response


def _preflight(methods: str):
    response = jsonify({'status': 'ok'})
    response.headers.add('Access-Control-Allow-Origin', '*')
    response.headers.add('Access-Control-Allow-Headers', 'Content-Type')
    response.headers.add('Access-Control-Allow-Methods', methods)
    return response


def _request_data() -> Dict:
    data = request.get_json(force=True, silent=True)
    if not data:
        data = request.form.to_dict()
    return data if isinstance(data, dict) else {}


@app.route('/api/transliterate', methods=['POST', 'OPTIONS'])
def api_transliterate():
    """Convert between SLP1 and Devanagari"""
    if request.method == 'OPTIONS':
        return _preflight('POST')

    text = str(_request_data().get('text') or '')
    if not text or not text.strip():
        return jsonify({'success': False, 'error': 'Please provide text to transliterate'}), 400

    try:
        return _cors(jsonify(learner.transliterate(text)))
    except Exception as e:
        logger.exception("Transliteration failed")
        return jsonify({'success': False, 'error': f'Transliteration error: {str(e)}'}), 500


@app.route('/api/declension', methods=['POST', 'OPTIONS'])
def api_declension():
    """Declension table for a stem and gender"""
    if request.method == 'OPTIONS':
        return _preflight('POST')

    data = _request_data()
    stem = data.get('stem', '')
    gender = data.get('gender', '')

    if not stem or not gender:
        return jsonify({'success': False, 'error': 'Missing required fields: stem, gender'}), 400

    optional = (data.get('paradigm'), data.get('form'))
    if not all(isinstance(v, str) for v in (stem, gender)) or not all(v is None or isinstance(v, str) for v in optional):
        return jsonify({'success': False, 'error': 'Fields stem, gender, paradigm and form must be strings'}), 400

    try:
        result = learner.declension(stem, gender, data.get('paradigm'), data.get('form'))
        return _cors(jsonify(result))
    except Exception as e:
        logger.exception("Declension failed for %s (%s)", stem, gender)
        return jsonify({'success': False, 'error': f'Declension error: {str(e)}'}), 500


@app.route('/api/analyze', methods=['POST', 'OPTIONS'])
def api_analyze():
    """Summarise the analyser's candidates for a word"""
    if request.method == 'OPTIONS':
        return _preflight('POST')

    data = _request_data()
    word = data.get('word', '')
    analyses = data.get('analyses') or []

    if not word:
        return jsonify({'success': False, 'error': 'Please provide a word'}), 400
    if not isinstance(word, str) or not isinstance(analyses, list):
        return jsonify({'success': False, 'error': 'word must be a string and analyses a list'}), 400

    try:
        result = learner.analyze(word, analyses)
        return _cors(jsonify(result))
    except Exception as e:
        logger.exception("Analysis failed for %s", word)
        return jsonify({'success': False, 'error': f'Analysis error: {str(e)}'}), 500


@app.route('/api/paradigms', methods=['GET'])
def api_paradigms():
    """List the known paradigms"""
    return _cors(jsonify(learner.paradigms()))


def print_table(result: Dict):
    """Print a declension result the way the popup lays it out"""
    if not result.get('success'):
        print(f"\nError: {result.get('error')}")
        return

    print(f"\n=== {result['stem']} ({result['stem_devanagari']}) ===")
    print(f"Paradigm: {result['paradigm_name']}")
    print(f"Bare stem: {result['bare_stem']}\n")

    case_names = result['case_names']
    for case, numbers in result['forms_devanagari'].items():
        label = case_names.get(case, {}).get('en', case)
        row = '  '.join(f"{numbers[n]:12s}" for n in ('s', 'd', 'p'))
        print(f"{label:14s}{row}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point

    <stem> <gender> [paradigm] prints a declension table, a single argument is
    transliterated, no arguments starts the API server.
    """
    args = sys.argv[1:] if argv is None else argv

    if len(args) > 1:
        result = learner.declension(args[0], args[1], args[2] if len(args) > 2 else None)
        print_table(result)
        return 0 if result['success'] else 1

    if len(args) == 1:
        result = learner.transliterate(args[0])
        print(f"SLP1:       {result['slp1']}")
        print(f"Devanagari: {result['devanagari']}")
        return 0

    # Server mode
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port, debug=os.environ.get('FLASK_DEBUG') == '1')
    return 0


if __name__ == '__main__':
    logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO'),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    sys.exit(main())
