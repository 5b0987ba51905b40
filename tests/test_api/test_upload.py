import json
import os
from unittest.mock import patch
from flask.testing import FlaskClient

from src.domain.errors import StorageError


def test_upload_quiz_success(client: FlaskClient, repository, math_quiz):
    """
    Test a well-formed quiz is stored and previewed.
    """
    response = client.post('/api/upload/', json=math_quiz)

    assert response.status_code == 200
    quiz_id = response.json['id']
    assert quiz_id.isdigit()
    assert response.json['title'] == 'Math'

    stored = repository.get_by_id(quiz_id)
    assert stored is not None
    assert stored.questions[0].question == '2+2?'
    assert stored.questions[0].answer == '4'


def test_upload_writes_pretty_printed_file(client: FlaskClient, storage_root, math_quiz):
    assert not os.path.exists(storage_root)

    response = client.post('/api/upload/', json=math_quiz)

    path = os.path.join(storage_root, f"{response.json['id']}.json")
    with open(path, encoding='utf-8') as fh:
        content = fh.read()
    assert content.startswith('{\n  "title": "Math"')
    assert json.loads(content)['questions'][0]['type'] == 'number'


def test_upload_without_title_gets_placeholder(client: FlaskClient, math_quiz):
    del math_quiz['title']

    response = client.post('/api/upload/', json=math_quiz)

    assert response.status_code == 200
    assert response.json['title'] == f"Quiz {response.json['id']}"


def test_upload_without_trailing_slash(client: FlaskClient, math_quiz):
    response = client.post('/api/upload', json=math_quiz)
    assert response.status_code == 200


def test_upload_accepts_json_without_content_type(client: FlaskClient, math_quiz):
    response = client.post('/api/upload/', data=json.dumps(math_quiz), content_type='text/plain')
    assert response.status_code == 200


def test_upload_rejects_other_methods(client: FlaskClient):
    """
    Test anything but POST is refused with a JSON 405.
    """
    for method in ('get', 'put', 'delete', 'patch'):
        response = getattr(client, method)('/api/upload/')
        assert response.status_code == 405
        assert response.json == {'error': 'Method not allowed'}
        assert 'POST' in response.headers['Allow']


def test_upload_rejects_non_json_body(client: FlaskClient, storage_root):
    response = client.post('/api/upload/', data='{not json', content_type='application/json')

    assert response.status_code == 400
    assert response.json['error'] == 'Invalid quiz document'
    assert not os.path.exists(storage_root)


def test_upload_rejects_non_object_body(client: FlaskClient):
    response = client.post('/api/upload/', json=[1, 2, 3])

    assert response.status_code == 400
    assert response.json['details'][0]['msg'] == 'expected a JSON object'


def test_upload_rejects_missing_questions(client: FlaskClient, storage_root):
    response = client.post('/api/upload/', json={'title': 'Empty'})

    assert response.status_code == 400
    assert any(detail['loc'] == ['questions'] for detail in response.json['details'])
    assert not os.path.exists(storage_root)


def test_upload_rejects_unknown_question_type(client: FlaskClient, math_quiz):
    math_quiz['questions'][0]['type'] = 'essay'

    response = client.post('/api/upload/', json=math_quiz)

    assert response.status_code == 400
    assert 'error' in response.json


def test_upload_storage_failure(client: FlaskClient, math_quiz):
    """
    Test a failing write is reported as a generic 500.
    """
    with patch('src.infrastructure.repositories.FileQuizRepository.create') as mock_create:
        mock_create.side_effect = StorageError("disk full")

        response = client.post('/api/upload/', json=math_quiz)

    assert response.status_code == 500
    assert response.json == {'error': 'Failed to upload JSON'}


def test_upload_too_large(app, math_quiz):
    app.config['MAX_CONTENT_LENGTH'] = 16
    response = app.test_client().post('/api/upload/', json=math_quiz)

    assert response.status_code == 413
    assert response.json == {'error': 'Quiz file is too large'}


def test_same_millisecond_uploads_do_not_collide(client: FlaskClient, repository, math_quiz):
    with patch('src.services.quiz_service._now_ms', return_value=1700000000000):
        first = client.post('/api/upload/', json=math_quiz).json
        math_quiz['title'] = 'Math 2'
        second = client.post('/api/upload/', json=math_quiz).json

    assert first['id'] == '1700000000000'
    assert second['id'] == '1700000000001'
    assert repository.get_by_id(first['id']).title == 'Math'
    assert repository.get_by_id(second['id']).title == 'Math 2'
