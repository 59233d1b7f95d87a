import json

from quizroom import create_app, rooms
from quizroom.services.quiz.handlers import handle_create_room, handle_join_room, handle_start_quiz

from conftest import TestConfig, make_questions


def _seed_room(custom_code='SNAP1'):
    with rooms.lock:
        handle_create_room(rooms, 'host', {
            'hostName': 'Quizmaster', 'questions': make_questions(3), 'customRoomCode': custom_code,
        })
        handle_join_room(rooms, 'p1', {'roomCode': custom_code, 'playerName': 'Alice'})
    return custom_code


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_health_counts_rooms(client):
    assert client.get('/health').get_json() == {'status': 'ok', 'rooms': 0}
    _seed_room()
    assert client.get('/health').get_json()['rooms'] == 1


def test_room_snapshot(client):
    code = _seed_room()
    res = client.get(f'/api/rooms/{code.lower()}')
    assert res.status_code == 200
    data = res.get_json()
    assert data['roomCode'] == code
    assert data['state'] == 'waiting'
    assert data['hostName'] == 'Quizmaster'
    assert data['questionCount'] == 3
    assert data['questionNumber'] is None
    assert [p['name'] for p in data['players']] == ['Alice']
    assert data['defaultTimeLimit'] == 30
    assert 'correctAnswer' not in json.dumps(data)


def test_room_snapshot_while_active(client):
    code = _seed_room()
    with rooms.lock:
        handle_start_quiz(rooms, 'host', {'roomCode': code})
    data = client.get(f'/api/rooms/{code}').get_json()
    assert data['state'] == 'active'
    assert data['questionNumber'] == 1
    assert data['leaderboard'] == [{'id': 'p1', 'name': 'Alice', 'score': 0}]


def test_room_snapshot_missing(client):
    res = client.get('/api/rooms/NOPE')
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Room not found'


def test_validate_puzzle_endpoint(client):
    res = client.post('/api/puzzles/validate', json={
        'puzzleType': 'spatial', 'answer': [1, 2, 9], 'solution': [1, 2, 3],
    })
    assert res.status_code == 200
    assert res.get_json() == {'isCorrect': False, 'score': 27, 'feedback': '2/3 correct selections'}


def test_validate_puzzle_requires_type(client):
    res = client.post('/api/puzzles/validate', json={'answer': 1, 'solution': 1})
    assert res.status_code == 400
    res = client.post('/api/puzzles/validate', data='nonsense', content_type='application/json')
    assert res.status_code == 400


def test_check_questions_command(tmp_path):
    app = create_app(TestConfig)
    runner = app.test_cli_runner()

    good = tmp_path / 'good.json'
    good.write_text(json.dumps({'questions': make_questions(2) + [{'question': 'broken'}]}))
    result = runner.invoke(args=['check-questions', str(good)])
    assert result.exit_code == 0
    assert '2 of 3 questions are valid' in result.output

    bad = tmp_path / 'bad.json'
    bad.write_text(json.dumps([{'question': 'broken'}]))
    result = runner.invoke(args=['check-questions', str(bad)])
    assert result.exit_code != 0
    assert 'No valid questions' in result.output
    rooms.clear()
