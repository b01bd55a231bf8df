from flask import current_app
from studysync.models import FlashcardDeck, Flashcard, StudySession, FlashcardAttempt
from studysync.extensions import db
from studysync.errors import ValidationError, NotFoundError, ConflictError
from studysync.services.practice_timer import PracticeTimer
from studysync.utils.timeparse import utcnow, isoformat_utc

class PracticeService:

    @staticmethod
    def list_decks(user_id, page=1, limit=10):
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        query = FlashcardDeck.query.filter_by(user_id=user_id, is_deleted=False)
        total = query.count()
        decks = query.order_by(FlashcardDeck.created_at.desc(), FlashcardDeck.id.desc()) \
            .offset((page - 1) * limit).limit(limit).all()
        pagination = {
            'page': page,
            'limit': limit,
            'total': total,
            'totalPages': (total + limit - 1) // limit
        }
        return decks, pagination

    @staticmethod
    def get_deck(user_id, deck_id):
        deck = FlashcardDeck.query.filter_by(id=deck_id, user_id=user_id, is_deleted=False).first()
        if not deck:
            raise NotFoundError("Deck not found")
        return deck

    @staticmethod
    def get_session(user_id, session_id):
        session = StudySession.query.filter_by(id=session_id, user_id=user_id).first()
        if not session:
            raise NotFoundError("Practice session not found")
        return session

    @staticmethod
    def _open_session(user_id, session_id):
        session = PracticeService.get_session(user_id, session_id)
        if session.is_completed:
            raise ConflictError("Practice session is already completed")
        return session

    @staticmethod
    def start_session(user, deck_id, session_type='all_cards', now=None):
        deck = PracticeService.get_deck(user.id, deck_id)
        total_cards = deck.cards.count()
        if total_cards == 0:
            raise ValidationError("Cannot start practice session - deck has no flashcards")

        session = StudySession(
            user_id=user.id,
            deck_id=deck.id,
            session_type=session_type or 'all_cards',
            started_at=now or utcnow()
        )
        db.session.add(session)
        db.session.commit()
        return session, deck, total_cards

    @staticmethod
    def _upsert_attempt(session, flashcard_id, is_correct, response_time_seconds, attempted_at):
        card = Flashcard.query.filter_by(id=flashcard_id, deck_id=session.deck_id).first()
        if not card:
            raise NotFoundError(f"Flashcard {flashcard_id} not found in this deck")

        attempt = FlashcardAttempt.query.filter_by(session_id=session.id, flashcard_id=card.id).first()
        if attempt is None:
            attempt = FlashcardAttempt(session_id=session.id, flashcard_id=card.id)
            db.session.add(attempt)
        attempt.is_correct = bool(is_correct)
        attempt.response_time_seconds = response_time_seconds
        attempt.attempted_at = attempted_at
        return attempt

    @staticmethod
    def record_attempt(user, session_id, flashcard_id, is_correct, response_time_seconds=None, now=None):
        """Store one answer. Re-sending the same card overwrites it, so retries are harmless."""
        session = PracticeService._open_session(user.id, session_id)
        timer = PracticeTimer.from_session(session)
        timer.answer(flashcard_id, is_correct, response_time_seconds)

        attempt = PracticeService._upsert_attempt(
            session, flashcard_id, is_correct, response_time_seconds, now or utcnow()
        )
        timer.apply_to(session)
        db.session.commit()
        return attempt

    @staticmethod
    def undo_last_attempt(user, session_id):
        session = PracticeService._open_session(user.id, session_id)
        last = session.attempts.order_by(None).order_by(
            FlashcardAttempt.attempted_at.desc(), FlashcardAttempt.id.desc()
        ).first()
        if not last:
            raise ValidationError("Nothing to undo")

        timer = PracticeTimer.from_session(session)
        timer.undo()
        timer.apply_to(session)
        db.session.delete(last)
        db.session.commit()
        return session

    @staticmethod
    def pause_session(user, session_id, now=None):
        session = PracticeService._open_session(user.id, session_id)
        timer = PracticeTimer.from_session(session)
        timer.pause(now or utcnow())
        timer.apply_to(session)
        db.session.commit()
        return session

    @staticmethod
    def resume_session(user, session_id, now=None):
        session = PracticeService._open_session(user.id, session_id)
        timer = PracticeTimer.from_session(session)
        timer.resume(now or utcnow())
        timer.apply_to(session)
        db.session.commit()
        return session

    @staticmethod
    def elapsed_seconds(session, now=None):
        if session.is_completed:
            return session.total_time_seconds
        return int(PracticeTimer.from_session(session).elapsed_seconds(now or utcnow()))

    @staticmethod
    def complete_session(user, session_id, client_totals=None, client_attempts=None, now=None):
        """
        Close a session and reconcile it with the client's local view.

        Attempts the client recorded but the server never received are
        backfilled; totals are then computed from stored attempts and the
        time from the server clock. Differences from the client's numbers
        are reported, not applied.
        """
        now = now or utcnow()
        client_totals = client_totals or {}
        session = PracticeService._open_session(user.id, session_id)
        client_attempts = client_attempts or []
        if any(not isinstance(item, dict) for item in client_attempts):
            raise ValidationError("Each attempt must be an object")

        stored_ids = {a.flashcard_id for a in session.attempts}
        backfilled = 0
        for item in client_attempts:
            flashcard_id = item.get('flashcardId')
            if flashcard_id is None or flashcard_id in stored_ids:
                continue
            PracticeService._upsert_attempt(
                session, flashcard_id, item.get('isCorrect', False), item.get('responseTimeSeconds'), now
            )
            stored_ids.add(flashcard_id)
            backfilled += 1
        if backfilled:
            db.session.flush()

        timer = PracticeTimer.from_session(session)
        timer.resume(now)
        totals = timer.totals()

        session.cards_studied = totals['cards_studied']
        session.cards_correct = totals['cards_correct']
        session.total_time_seconds = int(timer.elapsed_seconds(now))
        session.current_card_index = timer.current_card_index
        session.paused_seconds = timer.paused_seconds
        session.paused_at = None
        session.completed_at = now
        db.session.commit()

        discrepancy = {}
        for client_key, server_value in (('cardsStudied', session.cards_studied),
                                         ('cardsCorrect', session.cards_correct),
                                         ('totalTimeSeconds', session.total_time_seconds)):
            client_value = client_totals.get(client_key)
            if client_value is not None and client_value != server_value:
                discrepancy[client_key] = {'client': client_value, 'server': server_value}

        if backfilled or discrepancy:
            current_app.logger.info(
                f"Session {session.id} reconciled: {backfilled} attempt(s) backfilled, discrepancy={discrepancy}"
            )

        return session, totals['accuracy'], {'backfilledAttempts': backfilled, 'discrepancy': discrepancy}

    @staticmethod
    def session_summary(session):
        studied = session.cards_studied or 0
        correct = session.cards_correct or 0
        return {
            'sessionId': session.id,
            'deckId': session.deck_id,
            'cardsStudied': studied,
            'cardsCorrect': correct,
            'accuracy': round(correct / studied * 100) if studied else 0,
            'totalTimeSeconds': session.total_time_seconds,
            'completedAt': isoformat_utc(session.completed_at)
        }
