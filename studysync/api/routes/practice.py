from flask import Blueprint, request, jsonify
from studysync.services.practice_service import PracticeService
from studysync.errors import ValidationError
from studysync.utils.decorators import token_required

practice_bp = Blueprint('practice', __name__)

def _session_payload(session):
    data = session.to_dict()
    data['elapsedSeconds'] = PracticeService.elapsed_seconds(session)
    return data

@practice_bp.route('/decks', methods=['GET'])
@token_required
def list_decks(current_user):
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', 10, type=int)
    decks, pagination = PracticeService.list_decks(current_user.id, page, limit)
    return jsonify({'success': True, 'data': {'decks': [d.to_dict() for d in decks], 'pagination': pagination}})

@practice_bp.route('/decks/<int:deck_id>', methods=['GET'])
@token_required
def get_deck(current_user, deck_id):
    deck = PracticeService.get_deck(current_user.id, deck_id)
    return jsonify({'success': True, 'data': deck.to_dict(include_cards=True)})

@practice_bp.route('/flashcard-sessions', methods=['POST'])
@token_required
def start_session(current_user):
    data = request.get_json(silent=True) or {}
    if data.get('deckId') is None:
        raise ValidationError('deckId is required')

    session, deck, total_cards = PracticeService.start_session(
        current_user, data['deckId'], data.get('sessionType', 'all_cards')
    )
    return jsonify({'success': True, 'data': {
        'sessionId': session.id,
        'deckId': deck.id,
        'deckTitle': deck.title,
        'totalCards': total_cards
    }}), 201

@practice_bp.route('/practice-sessions/<int:session_id>', methods=['GET'])
@token_required
def get_session(current_user, session_id):
    session = PracticeService.get_session(current_user.id, session_id)
    data = _session_payload(session)
    data['deck'] = session.deck.to_dict(include_cards=True)
    data['attempts'] = [a.to_dict() for a in session.attempts]
    return jsonify({'success': True, 'data': data})

@practice_bp.route('/flashcard-attempts', methods=['POST'])
@token_required
def record_attempt(current_user):
    data = request.get_json(silent=True) or {}
    for field in ('sessionId', 'flashcardId', 'isCorrect'):
        if data.get(field) is None:
            raise ValidationError(f'{field} is required')

    attempt = PracticeService.record_attempt(
        current_user,
        data['sessionId'],
        data['flashcardId'],
        data['isCorrect'],
        data.get('responseTimeSeconds')
    )
    return jsonify({'success': True, 'data': attempt.to_dict()}), 201

@practice_bp.route('/flashcard-sessions/<int:session_id>/undo', methods=['POST'])
@token_required
def undo_attempt(current_user, session_id):
    session = PracticeService.undo_last_attempt(current_user, session_id)
    return jsonify({'success': True, 'data': _session_payload(session)})

@practice_bp.route('/flashcard-sessions/<int:session_id>/pause', methods=['POST'])
@token_required
def pause_session(current_user, session_id):
    session = PracticeService.pause_session(current_user, session_id)
    return jsonify({'success': True, 'data': _session_payload(session)})

@practice_bp.route('/flashcard-sessions/<int:session_id>/resume', methods=['POST'])
@token_required
def resume_session(current_user, session_id):
    session = PracticeService.resume_session(current_user, session_id)
    return jsonify({'success': True, 'data': _session_payload(session)})

@practice_bp.route('/flashcard-sessions/<int:session_id>/complete', methods=['POST'])
@token_required
def complete_session(current_user, session_id):
    data = request.get_json(silent=True) or {}
    attempts = data.get('attempts') or []
    if not isinstance(attempts, list):
        raise ValidationError('attempts must be a list')

    session, accuracy, reconciliation = PracticeService.complete_session(
        current_user,
        session_id,
        client_totals={k: data.get(k) for k in ('cardsStudied', 'cardsCorrect', 'totalTimeSeconds')},
        client_attempts=attempts
    )
    return jsonify({'success': True, 'data': {
        'sessionId': session.id,
        'cardsStudied': session.cards_studied,
        'cardsCorrect': session.cards_correct,
        'accuracy': accuracy,
        'totalTimeSeconds': session.total_time_seconds,
        'reconciliation': reconciliation
    }})

@practice_bp.route('/flashcard-sessions/<int:session_id>/summary', methods=['GET'])
@token_required
def session_summary(current_user, session_id):
    session = PracticeService.get_session(current_user.id, session_id)
    return jsonify({'success': True, 'data': PracticeService.session_summary(session)})
