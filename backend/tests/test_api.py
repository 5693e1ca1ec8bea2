def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def _join(client, pid, name):
    return client.post('/api/players', json={'player_id': pid, 'name': name})


def _build_bank(client):
    cat = client.post('/api/bank/categories', json={'name': 'Animal or Mineral', 'option1': 'Animal', 'option2': 'Mineral'})
    assert cat.status_code == 201
    cid = cat.get_json()['id']
    for term, answer in [('Coral', 'Animal'), ('Quartz', 'Mineral')]:
        res = client.post('/api/bank/questions', json={'term': term, 'correct_answer': answer, 'category_id': cid})
        assert res.status_code == 201
    return cid


def test_join_and_rejoin_resets_score(client):
    res = _join(client, 'uid-a', 'Alice')
    assert res.status_code == 201
    assert res.get_json() == {'id': 'uid-a', 'name': 'Alice', 'score': 0}

    res = _join(client, 'uid-a', 'Ally')
    assert res.status_code == 200
    assert res.get_json()['name'] == 'Ally'

    players = client.get('/api/players').get_json()
    assert [p['name'] for p in players] == ['Ally']


def test_rejoin_starts_score_over(client):
    from wager import db
    from wager.models import Player

    _join(client, 'uid-a', 'Alice')
    db.session.get(Player, 'uid-a').score = 4
    db.session.commit()

    res = _join(client, 'uid-a', 'Alice')
    assert res.status_code == 200
    assert res.get_json()['score'] == 0
    assert client.get('/api/players').get_json()[0]['score'] == 0


def test_join_requires_name(client):
    assert _join(client, 'uid-a', '   ').status_code == 400
    assert client.post('/api/players', json={'name': 'Bob'}).status_code == 400


def test_category_and_question_validation(client):
    assert client.post('/api/bank/categories', json={'name': 'X', 'option1': 'A'}).status_code == 400
    assert client.post('/api/bank/categories', json={'name': 'X', 'option1': 'A', 'option2': 'A'}).status_code == 400
    cid = client.post('/api/bank/categories', json={'name': 'X', 'option1': 'A', 'option2': 'B'}).get_json()['id']

    res = client.post('/api/bank/questions', json={'term': 't', 'correct_answer': 'C', 'category_id': cid})
    assert res.status_code == 400
    res = client.post('/api/bank/questions', json={'term': 't', 'correct_answer': 'A', 'category_id': 'nope'})
    assert res.status_code == 404
    res = client.post('/api/bank/questions', json={'term': 't', 'correct_answer': 'B', 'category_id': cid})
    assert res.status_code == 201
    assert res.get_json()['category_name'] == 'X'

    listed = client.get(f'/api/bank/questions?category_id={cid}').get_json()
    assert [q['term'] for q in listed] == ['t']

    qid = res.get_json()['id']
    assert client.delete(f'/api/bank/questions/{qid}').status_code == 200
    assert client.delete(f'/api/bank/questions/{qid}').status_code == 404
    assert client.delete(f'/api/bank/categories/{cid}').status_code == 200
    assert client.get('/api/bank/categories').get_json() == []


def test_start_with_empty_bank_fails(client):
    res = client.post('/api/game/start', json={'host_id': 'host'})
    assert res.status_code == 400
    assert client.get('/api/game/state').status_code == 404


def test_start_requires_host_id(client):
    _build_bank(client)
    assert client.post('/api/game/start', json={}).status_code == 400


def test_full_round_over_http(client):
    _build_bank(client)
    _join(client, 'uid-a', 'Alice')
    _join(client, 'uid-b', 'Bob')
    _join(client, 'uid-c', 'Cara')

    state = client.post('/api/game/start', json={'host_id': 'host'}).get_json()
    assert state['status'] == 'category-splash'
    assert state['round'] == 0
    assert state['playlist_length'] == 2
    assert state['applied'] is True

    # Non-host cannot drive the game
    assert client.post('/api/game/start-category', json={'host_id': 'uid-a'}).status_code == 403

    state = client.post('/api/game/start-category', json={'host_id': 'host'}).get_json()
    assert state['status'] == 'active'
    assert state['round'] == 1
    question = state['current_question']
    correct = question['correct_answer']
    wrong = [o for o in question['options'] if o != correct][0]

    res = client.post('/api/game/submissions', json={'player_id': 'uid-a', 'round': 1, 'guess': correct, 'wager': 3})
    assert res.status_code == 201
    res = client.post('/api/game/submissions', json={'player_id': 'uid-b', 'round': 1, 'guess': wrong, 'wager': 2})
    assert res.status_code == 201
    res = client.post('/api/game/submissions', json={'player_id': 'uid-c', 'round': 1, 'guess': wrong, 'wager': 9})
    assert res.status_code == 400

    ledger = client.get('/api/game/submissions').get_json()
    assert ledger['round'] == 1
    assert {s['player_id'] for s in ledger['submissions']} == {'uid-a', 'uid-b'}

    state = client.post('/api/game/reveal', json={'host_id': 'host'}).get_json()
    assert state['status'] == 'revealed'
    assert {r['player_id']: r['score_change'] for r in state['results']} == {'uid-a': '+3', 'uid-b': '-2'}
    assert state['revealed_question']['correct_answer'] == correct

    # Duplicate click on reveal is harmless
    again = client.post('/api/game/reveal', json={'host_id': 'host'}).get_json()
    assert again['applied'] is False
    scores = {p['id']: p['score'] for p in client.get('/api/players').get_json()}
    assert scores == {'uid-a': 3, 'uid-b': -2, 'uid-c': 0}

    # Late submission is accepted as a no-op
    res = client.post('/api/game/submissions', json={'player_id': 'uid-c', 'round': 1, 'guess': correct, 'wager': 1})
    assert res.status_code == 200
    assert res.get_json()['accepted'] is False

    # Same category: straight to the next question
    state = client.post('/api/game/advance', json={'host_id': 'host'}).get_json()
    assert state['status'] == 'active'
    assert state['round'] == 2
    assert state['results'] is None

    client.post('/api/game/reveal', json={'host_id': 'host'})
    state = client.post('/api/game/advance', json={'host_id': 'host'}).get_json()
    assert state['status'] == 'game-over'
    assert state['round'] == 2


def test_restart_resets_scores(client):
    _build_bank(client)
    _join(client, 'uid-a', 'Alice')
    client.post('/api/game/start', json={'host_id': 'host'})
    state = client.post('/api/game/start-category', json={'host_id': 'host'}).get_json()
    client.post('/api/game/submissions', json={
        'player_id': 'uid-a', 'round': 1, 'guess': state['current_question']['correct_answer'], 'wager': 5,
    })
    client.post('/api/game/reveal', json={'host_id': 'host'})
    assert client.get('/api/players').get_json()[0]['score'] == 5

    state = client.post('/api/game/start', json={'host_id': 'host'}).get_json()
    assert state['round'] == 0
    assert client.get('/api/players').get_json()[0]['score'] == 0


def test_remove_player_requires_host_once_started(client):
    _build_bank(client)
    _join(client, 'uid-a', 'Alice')
    _join(client, 'uid-b', 'Bob')
    client.post('/api/game/start', json={'host_id': 'host'})

    assert client.delete('/api/players/uid-b', json={'host_id': 'uid-a'}).status_code == 403
    assert client.delete('/api/players/uid-b', json={'host_id': 'host'}).status_code == 200
    assert client.delete('/api/players/uid-b', json={'host_id': 'host'}).status_code == 404
    assert [p['id'] for p in client.get('/api/players').get_json()] == ['uid-a']


def test_transition_before_game_is_404(client):
    res = client.post('/api/game/advance', json={'host_id': 'host'})
    assert res.status_code == 404
    assert 'error' in res.get_json()
