from studysync.extensions import db
from studysync.utils.timeparse import isoformat_utc
from datetime import datetime

class StudySession(db.Model):
    __tablename__ = 'study_sessions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    deck_id = db.Column(db.Integer, db.ForeignKey('flashcard_decks.id'), nullable=False)
    session_type = db.Column(db.String(32), default='all_cards')

    started_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    paused_at = db.Column(db.DateTime)
    paused_seconds = db.Column(db.Float, default=0.0, nullable=False)
    current_card_index = db.Column(db.Integer, default=0, nullable=False)

    cards_studied = db.Column(db.Integer, default=0)
    cards_correct = db.Column(db.Integer, default=0)
    total_time_seconds = db.Column(db.Integer, default=0)
    completed_at = db.Column(db.DateTime)

    deck = db.relationship('FlashcardDeck')
    attempts = db.relationship('FlashcardAttempt', backref='session', lazy='dynamic',
                               order_by='FlashcardAttempt.attempted_at')

    @property
    def is_completed(self):
        return self.completed_at is not None

    @property
    def is_paused(self):
        return self.paused_at is not None

    def to_dict(self):
        return {
            'id': self.id,
            'deckId': self.deck_id,
            'sessionType': self.session_type,
            'startedAt': isoformat_utc(self.started_at),
            'pausedAt': isoformat_utc(self.paused_at),
            'isPaused': self.is_paused,
            'pausedSeconds': self.paused_seconds,
            'currentCardIndex': self.current_card_index,
            'cardsStudied': self.cards_studied,
            'cardsCorrect': self.cards_correct,
            'totalTimeSeconds': self.total_time_seconds,
            'completedAt': isoformat_utc(self.completed_at)
        }

class FlashcardAttempt(db.Model):
    __tablename__ = 'flashcard_attempts'

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('study_sessions.id'), nullable=False, index=True)
    flashcard_id = db.Column(db.Integer, db.ForeignKey('flashcards.id'), nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False)
    response_time_seconds = db.Column(db.Float)
    attempted_at = db.Column(db.DateTime, default=datetime.utcnow)

    # One attempt per card per session; re-answering replaces it
    __table_args__ = (db.UniqueConstraint('session_id', 'flashcard_id', name='uq_attempt_session_card'),)

    def to_dict(self):
        return {
            'id': self.id,
            'sessionId': self.session_id,
            'flashcardId': self.flashcard_id,
            'isCorrect': self.is_correct,
            'responseTimeSeconds': self.response_time_seconds,
            'attemptedAt': isoformat_utc(self.attempted_at)
        }
