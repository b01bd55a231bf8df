from studysync.models.user import User
from studysync.models.room import LibraryRoom
from studysync.models.seat import Seat
from studysync.models.reservation import Reservation
from studysync.models.flashcard import FlashcardDeck, Flashcard
from studysync.models.practice import StudySession, FlashcardAttempt
