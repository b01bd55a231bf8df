from studysync.extensions import db
from studysync.utils.timeparse import isoformat_utc
from datetime import datetime

class FlashcardDeck(db.Model):
    __tablename__ = 'flashcard_decks'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    color = db.Column(db.String(32))
    creation_method = db.Column(db.String(32), default='manual')
    is_deleted = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    cards = db.relationship('Flashcard', backref='deck', lazy='dynamic', order_by='Flashcard.id')

    def to_dict(self, include_cards=False):
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'color': self.color,
            'creationMethod': self.creation_method,
            'cardCount': self.cards.count(),
            'createdAt': isoformat_utc(self.created_at)
        }
        if include_cards:
            data['flashcards'] = [c.to_dict() for c in self.cards]
        return data

class Flashcard(db.Model):
    __tablename__ = 'flashcards'

    id = db.Column(db.Integer, primary_key=True)
    deck_id = db.Column(db.Integer, db.ForeignKey('flashcard_decks.id'), nullable=False, index=True)
    question = db.Column(db.Text, nullable=False)
    answer = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'deckId': self.deck_id,
            'question': self.question,
            'answer': self.answer
        }
