import pytest
from datetime import datetime, timedelta
from studysync import db
from studysync.models import FlashcardDeck, Flashcard, FlashcardAttempt, StudySession
from studysync.services.practice_service import PracticeService
from studysync.services.practice_timer import PracticeTimer
from studysync.errors import ConflictError
from conftest import auth_headers

T0 = datetime(2030, 3, 1, 10, 0, 0)

# --- Timer ---

def test_elapsed_excludes_paused_time():
    timer = PracticeTimer(T0)
    timer.pause(T0 + timedelta(seconds=60))
    assert timer.elapsed_seconds(T0 + timedelta(seconds=100)) == 60
    timer.resume(T0 + timedelta(seconds=120))
    assert timer.paused_seconds == 60
    assert timer.elapsed_seconds(T0 + timedelta(seconds=150)) == 90

def test_pause_and_resume_are_idempotent():
    timer = PracticeTimer(T0)
    timer.resume(T0 + timedelta(seconds=5))
    assert timer.paused_seconds == 0
    timer.pause(T0 + timedelta(seconds=10))
    timer.pause(T0 + timedelta(seconds=20))
    timer.resume(T0 + timedelta(seconds=30))
    assert timer.paused_seconds == 20

def test_answer_advances_and_undo_steps_back():
    timer = PracticeTimer(T0)
    timer.answer(1, True, 2.5)
    timer.answer(2, False, 4.0)
    assert timer.current_card_index == 2
    assert timer.totals() == {'cards_studied': 2, 'cards_correct': 1, 'accuracy': 50}

    # Re-answering a card replaces it
    timer.answer(2, True, 1.0)
    assert timer.current_card_index == 2
    assert timer.totals()['cards_correct'] == 2

    assert timer.undo()['flashcard_id'] == 2
    assert timer.current_card_index == 1
    timer.undo()
    assert timer.undo() is None
    assert timer.current_card_index == 0
    assert timer.totals() == {'cards_studied': 0, 'cards_correct': 0, 'accuracy': 0}

# --- Service and API ---

@pytest.fixture
def deck(init_data):
    user = init_data[0]
    deck = FlashcardDeck(user_id=user.id, title='Biology')
    db.session.add(deck)
    db.session.flush()
    cards = [Flashcard(deck_id=deck.id, question=f'Q{i}', answer=f'A{i}') for i in range(1, 4)]
    db.session.add_all(cards)
    db.session.commit()
    return deck, cards

def test_list_and_get_decks(client, init_data, deck):
    user, other, _, _ = init_data
    body = client.get('/api/practice/decks?page=1&limit=10', headers=auth_headers(user)).get_json()
    assert body['data']['pagination']['total'] == 1
    assert body['data']['decks'][0]['cardCount'] == 3

    response = client.get(f'/api/practice/decks/{deck[0].id}', headers=auth_headers(user))
    assert len(response.get_json()['data']['flashcards']) == 3
    assert client.get(f'/api/practice/decks/{deck[0].id}', headers=auth_headers(other)).status_code == 404

def test_start_session(client, init_data, deck):
    user, other, _, _ = init_data
    response = client.post('/api/practice/flashcard-sessions', json={'deckId': deck[0].id},
                           headers=auth_headers(user))
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['deckTitle'] == 'Biology'
    assert data['totalCards'] == 3

    response = client.post('/api/practice/flashcard-sessions', json={'deckId': deck[0].id},
                           headers=auth_headers(other))
    assert response.status_code == 404

def test_start_session_on_empty_deck(client, init_data):
    user = init_data[0]
    empty = FlashcardDeck(user_id=user.id, title='Empty')
    db.session.add(empty)
    db.session.commit()

    response = client.post('/api/practice/flashcard-sessions', json={'deckId': empty.id},
                           headers=auth_headers(user))
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Cannot start practice session - deck has no flashcards'

def test_full_session_flow(client, init_data, deck):
    user = init_data[0]
    _, cards = deck
    headers = auth_headers(user)
    session_id = client.post('/api/practice/flashcard-sessions', json={'deckId': deck[0].id},
                             headers=headers).get_json()['data']['sessionId']

    for card, correct in zip(cards, (True, False, True)):
        response = client.post('/api/practice/flashcard-attempts', json={
            'sessionId': session_id, 'flashcardId': card.id, 'isCorrect': correct, 'responseTimeSeconds': 3
        }, headers=headers)
        assert response.status_code == 201

    # A retried write for the same card does not create a second row
    client.post('/api/practice/flashcard-attempts', json={
        'sessionId': session_id, 'flashcardId': cards[1].id, 'isCorrect': False
    }, headers=headers)
    assert FlashcardAttempt.query.filter_by(session_id=session_id).count() == 3

    session = client.get(f'/api/practice/practice-sessions/{session_id}', headers=headers).get_json()['data']
    assert session['currentCardIndex'] == 3
    assert len(session['attempts']) == 3

    response = client.post(f'/api/practice/flashcard-sessions/{session_id}/complete', json={
        'cardsStudied': 3, 'cardsCorrect': 2, 'totalTimeSeconds': 9
    }, headers=headers)
    data = response.get_json()['data']
    assert data['cardsStudied'] == 3
    assert data['cardsCorrect'] == 2
    assert data['accuracy'] == 67
    assert data['reconciliation']['backfilledAttempts'] == 0

    response = client.post(f'/api/practice/flashcard-sessions/{session_id}/complete', json={}, headers=headers)
    assert response.status_code == 409

    summary = client.get(f'/api/practice/flashcard-sessions/{session_id}/summary', headers=headers).get_json()
    assert summary['data']['accuracy'] == 67

def test_attempt_for_card_outside_deck(client, init_data, deck):
    user = init_data[0]
    headers = auth_headers(user)
    session_id = client.post('/api/practice/flashcard-sessions', json={'deckId': deck[0].id},
                             headers=headers).get_json()['data']['sessionId']
    response = client.post('/api/practice/flashcard-attempts', json={
        'sessionId': session_id, 'flashcardId': 9999, 'isCorrect': True
    }, headers=headers)
    assert response.status_code == 404

def test_complete_backfills_lost_attempts(app, init_data, deck):
    """A middle card whose write never reached the server is recovered at completion."""
    user = init_data[0]
    _, cards = deck
    session, _, _ = PracticeService.start_session(user, deck[0].id, now=T0)
    PracticeService.record_attempt(user, session.id, cards[0].id, True, 2.0, now=T0 + timedelta(seconds=5))
    PracticeService.record_attempt(user, session.id, cards[2].id, True, 2.0, now=T0 + timedelta(seconds=15))

    client_attempts = [
        {'flashcardId': cards[0].id, 'isCorrect': True, 'responseTimeSeconds': 2.0},
        {'flashcardId': cards[1].id, 'isCorrect': False, 'responseTimeSeconds': 4.0},
        {'flashcardId': cards[2].id, 'isCorrect': True, 'responseTimeSeconds': 2.0},
    ]
    session, accuracy, reconciliation = PracticeService.complete_session(
        user, session.id,
        client_totals={'cardsStudied': 3, 'cardsCorrect': 2, 'totalTimeSeconds': 30},
        client_attempts=client_attempts,
        now=T0 + timedelta(seconds=20)
    )

    assert reconciliation == {'backfilledAttempts': 1, 'discrepancy': {
        'totalTimeSeconds': {'client': 30, 'server': 20}
    }}
    assert session.cards_studied == 3
    assert session.cards_correct == 2
    assert accuracy == 67
    assert FlashcardAttempt.query.filter_by(session_id=session.id).count() == 3

def test_pause_resume_excluded_from_total_time(app, init_data, deck):
    user = init_data[0]
    session, _, _ = PracticeService.start_session(user, deck[0].id, now=T0)
    PracticeService.pause_session(user, session.id, now=T0 + timedelta(seconds=30))
    PracticeService.resume_session(user, session.id, now=T0 + timedelta(seconds=90))
    PracticeService.pause_session(user, session.id, now=T0 + timedelta(seconds=100))

    # Completing while paused stops the clock at the pause
    session, _, _ = PracticeService.complete_session(user, session.id, now=T0 + timedelta(seconds=200))
    assert session.total_time_seconds == 40
    assert session.paused_at is None

def test_undo_removes_last_attempt(app, init_data, deck):
    user = init_data[0]
    _, cards = deck
    session, _, _ = PracticeService.start_session(user, deck[0].id, now=T0)
    PracticeService.record_attempt(user, session.id, cards[0].id, True, now=T0 + timedelta(seconds=1))
    PracticeService.record_attempt(user, session.id, cards[1].id, False, now=T0 + timedelta(seconds=2))

    session = PracticeService.undo_last_attempt(user, session.id)
    assert session.current_card_index == 1
    assert [a.flashcard_id for a in session.attempts] == [cards[0].id]

def test_completed_session_rejects_attempts(app, init_data, deck):
    user = init_data[0]
    _, cards = deck
    session, _, _ = PracticeService.start_session(user, deck[0].id, now=T0)
    PracticeService.complete_session(user, session.id, now=T0 + timedelta(seconds=10))

    with pytest.raises(ConflictError):
        PracticeService.record_attempt(user, session.id, cards[0].id, True)
    assert db.session.get(StudySession, session.id).completed_at == T0 + timedelta(seconds=10)

def test_complete_rejects_malformed_attempts(client, init_data, deck):
    user = init_data[0]
    headers = auth_headers(user)
    session_id = client.post('/api/practice/flashcard-sessions', json={'deckId': deck[0].id},
                             headers=headers).get_json()['data']['sessionId']

    response = client.post(f'/api/practice/flashcard-sessions/{session_id}/complete',
                           json={'attempts': [1, 2]}, headers=headers)
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Each attempt must be an object'
    assert db.session.get(StudySession, session_id).completed_at is None
