from datetime import timedelta

from conftest import NOW
from parkwise.seed import seed_demo_data, spot_number


def test_spot_numbering():
    assert [spot_number(i) for i in (1, 9, 10, 11, 20, 45)] == ['A1', 'A9', 'A10', 'B1', 'B10', 'E5']


def test_seed_db_command(app, storage):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['seed-db', '--seed', '7'])
    assert 'Demo data created' in result.output

    user = storage.get_user_by_username('demo_user')
    lots = storage.list_parking_lots()
    assert [lot.name for lot in lots] == ['West Lot', 'North Lot', 'South Garage']
    assert [len(storage.list_parking_spots(lot.id)) for lot in lots] == [45, 30, 75]

    west_first_five = storage.list_parking_spots(lots[0].id)[:5]
    assert all(s.type == 'student' and s.is_available for s in west_first_five)

    reservations = storage.list_reservations(user.id)
    assert [r.status for r in reservations] == ['active', 'upcoming']
    for reservation in reservations:
        assert storage.get_parking_spot(reservation.spot_id).is_available is False
    assert len(storage.list_vehicles(user.id)) == 2
    assert storage.count_unread_notifications(user.id) == 3

    again = runner.invoke(args=['seed-db'])
    assert 'already seeded' in again.output
    assert len(storage.list_parking_lots()) == 3


def test_seeded_demo_user_can_log_in(services, client):
    seed_demo_data(services, seed=1)

    response = client.post('/api/auth/login', json={'username': 'demo_user', 'password': 'password123'})
    assert response.status_code == 200
    assert response.get_json()['fullName'] == 'Alex Johnson'


def test_sweep_command(app, services, campus):
    services.reservations.create(campus.alice.id, campus.a1.id, campus.civic.id,
                                 NOW - timedelta(hours=3), NOW - timedelta(hours=1))

    result = app.test_cli_runner().invoke(args=['sweep-reservations'])

    assert result.output.strip() == '0 activated, 1 completed'
    assert services.storage.get_parking_spot(campus.a1.id).is_available is True


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=['init-db'])
    assert 'Database tables created' in result.output
