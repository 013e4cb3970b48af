from conftest import reservation_payload


def test_notifications_require_session(client):
    assert client.get('/api/notifications').status_code == 401
    assert client.get('/api/notifications/unread-count').status_code == 401
    assert client.put('/api/notifications/1/read').status_code == 401


def test_lifecycle_notifications(alice_client, campus):
    assert alice_client.get('/api/notifications/unread-count').get_json() == {'count': 0}

    created = alice_client.post('/api/reservations', json=reservation_payload(campus.a1, campus.civic))
    alice_client.put(f"/api/reservations/{created.get_json()['id']}/cancel")

    notifications = alice_client.get('/api/notifications').get_json()
    # newest first
    assert [n['type'] for n in notifications] == ['info', 'success']
    assert notifications[1]['message'].startswith('Your reservation for West Lot has been confirmed')
    assert notifications[0]['createdAt'].endswith('Z')
    assert alice_client.get('/api/notifications/unread-count').get_json() == {'count': 2}


def test_mark_read(alice_client, bob_client, services, campus):
    notification = services.notifications.emit(campus.alice.id, 'Hello', 'info')

    forbidden = bob_client.put(f'/api/notifications/{notification.id}/read')
    assert forbidden.status_code == 403

    response = alice_client.put(f'/api/notifications/{notification.id}/read')
    assert response.status_code == 200
    assert response.get_json()['isRead'] is True
    assert alice_client.get('/api/notifications/unread-count').get_json() == {'count': 0}


def test_mark_read_unknown(alice_client):
    assert alice_client.put('/api/notifications/999/read').status_code == 404
    assert alice_client.put('/api/notifications/abc/read').status_code == 400
