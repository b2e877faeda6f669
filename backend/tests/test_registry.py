from quizroom.services.quiz import PlayerRegistry, RoundTracker, project_leaderboard


def test_registry_size_tracks_distinct_connections():
    registry = PlayerRegistry()
    for sid, name in [('a', 'Alice'), ('b', 'Bob'), ('a', 'Alice'), ('c', 'Alice'), ('b', 'Bobby')]:
        registry.upsert(sid, name)
    assert len(registry) == 3
    registry.remove('b')
    assert len(registry) == 2
    # nicknames are not unique
    assert [p.nickname for p in registry] == ['Alice', 'Alice']


def test_host_is_first_joiner_and_moves_on_removal():
    registry = PlayerRegistry()
    assert registry.host is None
    registry.upsert('a', 'Alice')
    registry.upsert('b', 'Bob')
    registry.upsert('c', 'Cara')
    assert registry.host_id == 'a'
    registry.remove('b')
    assert registry.host_id == 'a'
    registry.remove('a')
    assert registry.host_id == 'c'
    registry.remove('c')
    assert registry.host_id is None
    assert registry.upsert('d', 'Dan').is_host is True


def test_award_and_reset_scores():
    registry = PlayerRegistry()
    registry.upsert('a', 'Alice')
    registry.award('a', 10)
    registry.award('a', 10)
    assert registry.award('ghost', 10) is None
    assert registry.get('a').score == 20
    registry.reset_scores()
    assert registry.get('a').score == 0


def test_round_tracker_records_once():
    registry = PlayerRegistry()
    registry.upsert('a', 'Alice')
    tracker = RoundTracker()
    assert tracker.record('a') is True
    assert tracker.record('a') is False
    assert tracker.record('gone') is True
    assert len(tracker) == 2
    assert tracker.answered_among(registry) == 1
    tracker.clear()
    assert len(tracker) == 0
    assert not tracker.has_answered('a')


def test_leaderboard_sorts_by_score_with_stable_ties():
    registry = PlayerRegistry()
    for sid, name in [('a', 'Alice'), ('b', 'Bob'), ('c', 'Cara'), ('d', 'Dan')]:
        registry.upsert(sid, name)
    registry.award('c', 10)
    registry.award('d', 20)
    assert project_leaderboard(registry) == [
        {'nickname': 'Dan', 'score': 20},
        {'nickname': 'Cara', 'score': 10},
        {'nickname': 'Alice', 'score': 0},
        {'nickname': 'Bob', 'score': 0},
    ]


def test_leaderboard_of_empty_registry():
    assert project_leaderboard(PlayerRegistry()) == []
