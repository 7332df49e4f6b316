"""Flask web application for Persona Quiz."""

import logging
import os
import uuid

from flask import Flask, render_template, request, jsonify, session

from config import ADVANCE_DELAY_MS, LOG_LEVEL, QUESTION_COUNT, SECRET_KEY
from persona_quiz.controller import QuizController
from persona_quiz.ledger import InvalidAnswerError
from persona_quiz.models import CATEGORY_OPTIONS, LIKERT_LABELS, PROFILE_FIELDS
from persona_quiz.session import Mode, Participant

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = SECRET_KEY

controller = QuizController()


def _session_id() -> str:
    """Stable id for the browser session; quiz state itself stays server side."""
    sid = session.get('quiz_id')
    if not sid:
        sid = uuid.uuid4().hex
        session['quiz_id'] = sid
    return sid


def _state_response(state):
    return jsonify({'success': True, 'state': state.to_dict()})


def _bad_request(message: str):
    return jsonify({'error': message}), 400


@app.route('/')
def index():
    """Render the main page."""
    _session_id()
    return render_template(
        'index.html',
        categories=CATEGORY_OPTIONS,
        likert=LIKERT_LABELS,
        advance_delay_ms=ADVANCE_DELAY_MS,
        question_count=QUESTION_COUNT,
    )


@app.route('/api/session', methods=['GET'])
def api_session():
    """Return the current quiz state."""
    return _state_response(controller.state(_session_id()))


@app.route('/api/mode', methods=['POST'])
def api_mode():
    """Switch between individual and comparison mode (resets the session)."""
    data = request.get_json(silent=True) or {}
    try:
        mode = Mode(data.get('mode'))
    except ValueError:
        return _bad_request("Mode must be 'individual' or 'comparison'")
    return _state_response(controller.select_mode(_session_id(), mode))


@app.route('/api/profile', methods=['POST'])
def api_profile():
    """Edit one profile field."""
    data = request.get_json(silent=True) or {}

    try:
        participant = Participant(data.get('participant', 'a'))
    except ValueError:
        return _bad_request("Participant must be 'a' or 'b'")

    field_name = data.get('field')
    if field_name not in PROFILE_FIELDS:
        return _bad_request(f"Field must be one of {', '.join(PROFILE_FIELDS)}")

    value = data.get('value', '')
    if value is None:
        value = ''
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        return _bad_request('Value must be a string')
    value = str(value)

    if field_name == 'age':
        value = value.strip()
        if value and not value.isdigit():
            return _bad_request('Age must be a number')
    if field_name == 'category' and value and value not in CATEGORY_OPTIONS:
        return _bad_request(f"Category must be one of {', '.join(CATEGORY_OPTIONS)}")

    return _state_response(controller.edit_profile(_session_id(), participant, field_name, value))


@app.route('/api/submit', methods=['POST'])
def api_submit():
    """Submit the profile form; blocks until the question set arrives or fails."""
    return _state_response(controller.submit(_session_id()))


@app.route('/api/answer', methods=['POST'])
def api_answer():
    """Record an answer for the current participant."""
    data = request.get_json(silent=True) or {}
    question_id = data.get('question_id')
    value = data.get('value')
    # JSON true/false arrive as bool, which is an int subclass
    if any(isinstance(v, bool) or not isinstance(v, int) for v in (question_id, value)):
        return _bad_request('question_id and value must be integers')

    try:
        state = controller.answer(_session_id(), question_id, value)
    except InvalidAnswerError as e:
        return _bad_request(str(e))
    return _state_response(state)


@app.route('/api/advance', methods=['POST'])
def api_advance():
    """Move to the next question once the current one is answered."""
    return _state_response(controller.advance(_session_id()))


@app.route('/api/back', methods=['POST'])
def api_back():
    """Go back one question."""
    return _state_response(controller.back(_session_id()))


@app.route('/api/complete', methods=['POST'])
def api_complete():
    """Finish the questionnaire; hands over to person two or runs the analysis."""
    return _state_response(controller.complete(_session_id()))


@app.route('/api/reset', methods=['POST'])
def api_reset():
    """Start over."""
    return _state_response(controller.reset(_session_id()))


if __name__ == '__main__':
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Make sure an API key is set
    if not os.environ.get('GEMINI_API_KEY') and not os.environ.get('GOOGLE_API_KEY') and not os.environ.get('OPENAI_API_KEY'):
        logger.warning("No GEMINI_API_KEY, GOOGLE_API_KEY or OPENAI_API_KEY set; assessment calls will fail")

    port = int(os.environ.get('PORT', 5000))
    app.run(debug=False, host='0.0.0.0', port=port)
