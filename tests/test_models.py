from datetime import datetime

from app.models.user import Language, Task, User


def test_document_round_trip_keeps_key():
    user = User(id="U1", contact="u1@example.com", tasks=[Task(id="task1", attempts=3, guesses=["a"])])
    document = user.to_document()

    assert document["_id"] == "U1"
    assert document["language"] == "pl"
    assert User.from_document(document) == user


def test_unknown_language_falls_back_to_primary():
    assert User.from_document({"_id": "U1", "language": "de"}).language == Language.POLISH


def test_id_taken_from_store_key():
    assert User.from_document({"_id": "U7"}).id == "U7"


def test_language_toggle():
    assert Language.POLISH.toggled() == Language.ENGLISH
    assert Language.ENGLISH.toggled() == Language.POLISH


def test_add_guesses_dedupes():
    task = Task(id="task1", guesses=["a"])
    task.add_guesses(["b", "a", "b"])
    assert task.guesses == ["a", "b"]
    assert not task.is_completed
    task.completed_at = datetime(2024, 1, 1)
    assert task.is_completed
