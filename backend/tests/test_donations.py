import pytest
from sqlalchemy import text
from conftest import donation
from fundboard import donations, models
from fundboard.errors import ConflictError, ValidationError


def test_health(client):
    resp = client.get('/api/health')
    assert resp.status_code == 200
    assert resp.json() == {'ok': True}


def test_donate_then_conflict_scenario(client):
    state = client.get('/api/state').json()
    assert state['raised'] == 0
    assert state['goal'] == 3500
    assert state['takenNumbers'] == []

    resp = client.post('/api/donations', json=donation([3, 7], amount=10))
    assert resp.status_code == 201
    assert resp.json() == {'ok': True}

    state = client.get('/api/state').json()
    assert state['raised'] == 10
    assert state['donationCount'] == 1
    assert state['takenNumbers'] == [3, 7]
    assert state['goal'] == 3500

    resp = client.post('/api/donations', json=donation([7, 9]))
    assert resp.status_code == 409
    assert resp.json() == {'error': 'numbers already taken', 'conflicts': [7]}
    assert client.get('/api/state').json() == state


def test_conflicts_list_exactly_the_overlap_in_submission_order(client):
    client.post('/api/donations', json=donation([1, 2, 3]))
    client.post('/api/donations', json=donation([10, 20]))

    resp = client.post('/api/donations', json=donation([20, 5, 3, 6]))
    assert resp.status_code == 409
    assert resp.json()['conflicts'] == [20, 3]
    assert 5 not in client.get('/api/state').json()['takenNumbers']


def test_disjoint_donations_accumulate(client):
    batches = [[1, 2], [40], [80, 79, 5]]
    for numbers in batches:
        assert client.post('/api/donations', json=donation(numbers)).status_code == 201

    state = client.get('/api/state').json()
    assert state['raised'] == sum(sum(b) for b in batches)
    assert state['donationCount'] == 3
    assert state['takenNumbers'] == sorted(n for b in batches for n in b)


def test_amount_is_not_tied_to_numbers(client):
    resp = client.post('/api/donations', json=donation([4, 5], amount=50))
    assert resp.status_code == 201
    assert client.get('/api/state').json()['raised'] == 50


@pytest.mark.parametrize('overrides, error', [
    ({'numbers': []}, 'numbers[] required'),
    ({'numbers': None}, 'numbers[] required'),
    ({'numbers': '3,7'}, 'numbers[] required'),
    ({'numbers': [3, 'x']}, 'numbers must be integers'),
    ({'numbers': [0]}, 'numbers must be between 1 and 80'),
    ({'numbers': [81]}, 'numbers must be between 1 and 80'),
    ({'numbers': [4, 4]}, 'numbers must not repeat'),
    ({'amount': 0}, 'invalid amount'),
    ({'amount': -5}, 'invalid amount'),
    ({'amount': 2.5}, 'invalid amount'),
    ({'amount': '10'}, 'invalid amount'),
    ({'amount': True}, 'invalid amount'),
    ({'method': 'bitcoin'}, 'invalid method'),
    ({'donorName': ''}, 'donor info required'),
    ({'donorPhone': '   '}, 'donor info required'),
    ({'donorAddress': None}, 'donor info required'),
])
def test_invalid_donations_are_rejected_before_any_write(client, overrides, error):
    body = donation([3, 7], amount=10)
    body.update(overrides)
    resp = client.post('/api/donations', json=body)
    assert resp.status_code == 400
    assert resp.json() == {'error': error}

    state = client.get('/api/state').json()
    assert state['donationCount'] == 0
    assert state['takenNumbers'] == []


def test_first_failing_rule_wins():
    with pytest.raises(ValidationError) as exc:
        donations.validate_donation({'numbers': [], 'amount': -1, 'method': 'nope'})
    assert exc.value.message == 'numbers[] required'

    with pytest.raises(ValidationError) as exc:
        donations.validate_donation({'numbers': [1], 'amount': -1, 'method': 'nope'})
    assert exc.value.message == 'invalid amount'


def test_validate_donation_normalizes_input():
    parsed = donations.validate_donation(
        donation([3.0, 7], amount=10.0, donorName='  Jo  ', method='zelle'))
    assert parsed.numbers == [3, 7]
    assert parsed.amount == 10
    assert parsed.donor_name == 'Jo'
    assert parsed.method == 'zelle'


def test_malformed_body_is_a_validation_error(client):
    resp = client.post('/api/donations', content=b'{not json', headers={'Content-Type': 'application/json'})
    assert resp.status_code == 400
    assert 'error' in resp.json()

    resp = client.post('/api/donations')
    assert resp.status_code == 400
    assert resp.json() == {'error': 'numbers[] required'}


def test_manual_entry_claims_numbers(client):
    resp = client.post('/api/donations', json=donation(
        [11, 12], method='manual', donorName='Manual Entry (Admin)', donorPhone='N/A', donorAddress='N/A'))
    assert resp.status_code == 201
    assert client.get('/api/state').json()['takenNumbers'] == [11, 12]


def test_record_donation_stores_fields_and_claims(db):
    parsed = donations.validate_donation(donation([9, 2], amount=11, method='cashapp'))
    record = donations.record_donation(db, parsed)

    assert record.id is not None
    assert record.numbers == '9,2'
    assert record.method == 'cashapp'
    assert record.created_at is not None
    claims = db.query(models.NumberClaim).order_by(models.NumberClaim.number).all()
    assert [(c.number, c.donation_id) for c in claims] == [(2, record.id), (9, record.id)]


def test_claim_race_is_reported_as_conflict(db, monkeypatch):
    donations.record_donation(db, donations.validate_donation(donation([5, 6])))

    # simulate a concurrent writer: the pre-check sees nothing, the commit hits the constraint
    real_find = donations.find_conflicts
    calls = []

    def stale_then_real(session, numbers):
        calls.append(numbers)
        return [] if len(calls) == 1 else real_find(session, numbers)

    monkeypatch.setattr(donations, 'find_conflicts', stale_then_real)

    with pytest.raises(ConflictError) as exc:
        donations.record_donation(db, donations.validate_donation(donation([6, 7])))
    assert exc.value.conflicts == [6]
    assert db.query(models.Donation).count() == 1
    assert sorted(n for (n,) in db.query(models.NumberClaim.number).all()) == [5, 6]


def test_oversized_amount_is_rejected(client):
    resp = client.post('/api/donations', json=donation([3], amount=10**20))
    assert resp.status_code == 400
    assert resp.json() == {'error': 'invalid amount'}

    resp = client.post('/api/donations', json=donation([3], amount=2**31))
    assert resp.status_code == 400

    assert client.post('/api/donations', json=donation([3], amount=2**31 - 1)).status_code == 201
    assert client.get('/api/state').json()['raised'] == 2**31 - 1


def test_deleting_a_donation_releases_its_numbers(client, db):
    client.post('/api/donations', json=donation([3, 7], amount=10))
    client.post('/api/donations', json=donation([12]))

    # operators remove ledger rows by hand from the database console
    db.execute(text('DELETE FROM donations WHERE numbers = :n'), {'n': '3,7'})
    db.commit()

    state = client.get('/api/state').json()
    assert state['donationCount'] == 1
    assert state['raised'] == 12
    assert state['takenNumbers'] == [12]

    assert client.post('/api/donations', json=donation([7, 3])).status_code == 201
    assert client.get('/api/state').json()['takenNumbers'] == [3, 7, 12]
