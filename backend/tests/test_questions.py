def _create(client, **fields):
    payload = {'question': 'What is 2 + 2?'}
    payload.update(fields)
    res = client.post('/api/questions', json=payload)
    assert res.status_code == 201, res.get_json()
    return res.get_json()['question']


def test_create_question_applies_defaults(alice):
    question = _create(alice)
    assert question['owner_id'] == alice.user['id']
    assert question['difficulty'] == 'easy'
    assert question['is_active'] is True
    assert question['options'] is None
    assert question['created_at'] == question['updated_at']


def test_create_question_stores_all_fields(alice):
    options = [{'id': 'A', 'label': '3'}, {'id': 'B', 'label': '4'}]
    question = _create(
        alice,
        category='Math',
        subcategory='Arithmetic',
        difficulty='hard',
        options=options,
        correct_answer='B',
        explanation='Basic addition',
        is_active=False,
    )
    assert question['category'] == 'Math'
    assert question['subcategory'] == 'Arithmetic'
    assert question['difficulty'] == 'hard'
    assert question['options'] == options
    assert question['correct_answer'] == 'B'
    assert question['explanation'] == 'Basic addition'
    assert question['is_active'] is False


def test_create_question_validation(alice):
    res = alice.post('/api/questions', json={})
    assert res.status_code == 400
    assert res.get_json() == {'error': 'Question is required', 'code': 'BAD_REQUEST'}

    res = alice.post('/api/questions', json={'question': ''})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Question is required'

    assert alice.post('/api/questions', json={'question': 'Q', 'difficulty': 'extreme'}).status_code == 400
    assert alice.post('/api/questions', json={'question': 'Q', 'is_active': 'yes'}).status_code == 400
    assert alice.post('/api/questions', json={'question': 'Q', 'category': None}).status_code == 400
    assert alice.post('/api/questions', json=['not', 'an', 'object']).status_code == 400


def test_malformed_json_is_rejected(alice):
    res = alice.post('/api/questions', data='{"question": ', content_type='application/json')
    assert res.status_code == 400
    assert res.get_json()['code'] == 'BAD_REQUEST'


def test_update_question_changes_only_given_fields(alice):
    question = _create(alice, category='Math', correct_answer='A')
    res = alice.patch(f"/api/questions/{question['id']}", json={'difficulty': 'medium', 'correct_answer': None})
    assert res.status_code == 200
    updated = res.get_json()['question']
    assert updated['difficulty'] == 'medium'
    assert updated['correct_answer'] is None
    assert updated['category'] == 'Math'
    assert updated['question'] == question['question']
    assert updated['updated_at'] >= question['updated_at']


def test_update_question_without_changes_returns_existing(alice):
    question = _create(alice)
    res = alice.patch(f"/api/questions/{question['id']}", json={})
    assert res.status_code == 200
    assert res.get_json()['question'] == question


def test_update_question_rejects_empty_text(alice):
    question = _create(alice)
    res = alice.patch(f"/api/questions/{question['id']}", json={'question': ''})
    assert res.status_code == 400


def test_update_question_is_owner_only(alice, bob):
    question = _create(alice)
    res = bob.patch(f"/api/questions/{question['id']}", json={'question': 'Hijacked'})
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Question not found.', 'code': 'NOT_FOUND'}
    assert alice.patch('/api/questions/9999', json={'question': 'x'}).status_code == 404


def test_list_my_questions_filters_inactive(alice, bob):
    active = _create(alice, question='Active one')
    inactive = _create(alice, question='Retired one', is_active=False)
    _create(bob, question='Not mine')

    res = alice.get('/api/questions/mine')
    assert res.status_code == 200
    assert [q['id'] for q in res.get_json()['questions']] == [active['id']]

    res = alice.get('/api/questions/mine?include_inactive=true')
    assert [q['id'] for q in res.get_json()['questions']] == [active['id'], inactive['id']]
