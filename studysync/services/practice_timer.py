from datetime import datetime


class PracticeTimer:
    """
    Practice session clock and local attempt log.

    Elapsed time only counts active study: every pause/resume interval is
    accumulated in ``paused_seconds`` and subtracted. Answers advance the
    card index right away, so callers can move on before the attempt is
    persisted.
    """

    def __init__(self, started_at: datetime, paused_seconds: float = 0.0, paused_at: datetime = None,
                 current_card_index: int = 0, attempts: list = None):
        self.started_at = started_at
        self.paused_seconds = paused_seconds or 0.0
        self.paused_at = paused_at
        self.current_card_index = current_card_index or 0
        self.attempts = list(attempts or [])

    @classmethod
    def from_session(cls, session):
        attempts = [
            {
                'flashcard_id': a.flashcard_id,
                'is_correct': a.is_correct,
                'response_time_seconds': a.response_time_seconds,
            }
            for a in session.attempts
        ]
        return cls(session.started_at, session.paused_seconds, session.paused_at,
                   session.current_card_index, attempts)

    def apply_to(self, session):
        session.paused_seconds = self.paused_seconds
        session.paused_at = self.paused_at
        session.current_card_index = self.current_card_index

    @property
    def is_paused(self):
        return self.paused_at is not None

    def pause(self, now: datetime):
        if self.is_paused:
            return
        self.paused_at = now

    def resume(self, now: datetime):
        if not self.is_paused:
            return
        self.paused_seconds += max((now - self.paused_at).total_seconds(), 0.0)
        self.paused_at = None

    def elapsed_seconds(self, now: datetime) -> float:
        paused = self.paused_seconds
        if self.is_paused:
            # Clock is frozen while paused
            paused += max((now - self.paused_at).total_seconds(), 0.0)
        return max((now - self.started_at).total_seconds() - paused, 0.0)

    def answer(self, flashcard_id, is_correct: bool, response_time_seconds: float = None):
        attempt = {
            'flashcard_id': flashcard_id,
            'is_correct': bool(is_correct),
            'response_time_seconds': response_time_seconds,
        }
        for i, existing in enumerate(self.attempts):
            if existing['flashcard_id'] == flashcard_id:
                self.attempts[i] = attempt
                return attempt
        self.attempts.append(attempt)
        self.current_card_index += 1
        return attempt

    def undo(self):
        """Drop the last attempt and go back to its card. Returns the removed attempt, or None."""
        if not self.attempts:
            return None
        attempt = self.attempts.pop()
        self.current_card_index = max(self.current_card_index - 1, 0)
        return attempt

    def totals(self):
        studied = len(self.attempts)
        correct = sum(1 for a in self.attempts if a['is_correct'])
        return {
            'cards_studied': studied,
            'cards_correct': correct,
            'accuracy': round(correct / studied * 100) if studied else 0,
        }
