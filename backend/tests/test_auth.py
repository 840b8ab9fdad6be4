def test_register_login_and_check(client):
    res = client.post('/register', json={'username': 'carol', 'password': 'secret'})
    assert res.status_code == 201
    assert res.get_json()['user']['username'] == 'carol'

    res = client.get('/check_login')
    assert res.status_code == 200
    assert res.get_json()['user']['username'] == 'carol'

    assert client.post('/logout').status_code == 200
    assert client.get('/check_login').status_code == 401

    res = client.post('/login', json={'username': 'carol', 'password': 'wrong'})
    assert res.status_code == 401
    res = client.post('/login', json={'username': 'carol', 'password': 'secret'})
    assert res.status_code == 200
    assert res.get_json()['success'] is True


def test_register_rejects_duplicates_and_missing_fields(client):
    assert client.post('/register', json={'username': 'dave', 'password': 'pw'}).status_code == 201
    assert client.post('/register', json={'username': 'dave', 'password': 'pw'}).status_code == 400
    assert client.post('/register', json={'username': 'erin'}).status_code == 400


def test_actions_require_sign_in(client):
    res = client.post('/api/questions', json={'question': 'Q?'})
    assert res.status_code == 401
    body = res.get_json()
    assert body['code'] == 'UNAUTHORIZED'
    assert body['error'] == 'You must be signed in to perform this action.'

    assert client.post('/api/matches', json={}).status_code == 401
    assert client.get('/api/questions/mine').status_code == 401
    assert client.post('/api/rounds/1/answers', json={'player_id': 1}).status_code == 401


def test_each_client_acts_as_its_own_user(alice, bob):
    assert alice.user['id'] != bob.user['id']
    own = alice.post('/api/questions', json={'question': 'Whose?'}).get_json()['question']
    theirs = bob.post('/api/questions', json={'question': 'Whose?'}).get_json()['question']
    assert own['owner_id'] == alice.user['id']
    assert theirs['owner_id'] == bob.user['id']
    assert alice.get('/check_login').get_json()['user']['username'] == 'alice'
    assert bob.get('/check_login').get_json()['user']['username'] == 'bob'


def test_active_matches_lists_owned_and_joined(alice, bob):
    own = alice.post('/api/matches', json={'title': 'Mine'}).get_json()['match']
    other = bob.post('/api/matches', json={'title': 'Theirs'}).get_json()['match']
    alice.post(f"/api/matches/{other['id']}/join", json={'display_name': 'Al'})
    finished = alice.post('/api/matches', json={'title': 'Old'}).get_json()['match']
    alice.patch(f"/api/matches/{finished['id']}", json={'status': 'cancelled'})

    res = alice.get('/matches/active')
    assert res.status_code == 200
    ids = [m['id'] for m in res.get_json()]
    assert ids == [own['id'], other['id']]
