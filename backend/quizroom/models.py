from quizroom import db
import json


class QuestionRecord(db.Model):
    """Stored question for ``QUESTION_SOURCE=database``.

    Options are kept as a JSON-encoded list of strings.
    """
    __tablename__ = 'question'
    id = db.Column(db.Integer, primary_key=True)
    position = db.Column(db.Integer, nullable=False, default=0, index=True)
    text = db.Column(db.Text, nullable=False)
    options = db.Column(db.Text, nullable=False)
    correct_option_index = db.Column(db.Integer, nullable=False)

    @classmethod
    def from_question(cls, question, position=0):
        return cls(
            id=question.id if isinstance(question.id, int) else None,
            position=position,
            text=question.text,
            options=json.dumps(list(question.options)),
            correct_option_index=question.correct_option_index,
        )

    def to_dict(self):
        try:
            options = json.loads(self.options) if self.options else []
        except ValueError:
            options = []
        return {
            'id': self.id,
            'text': self.text,
            'options': options,
            'correctOptionIndex': self.correct_option_index,
        }
