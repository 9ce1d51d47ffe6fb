import datetime

import pytest
from django.db import DatabaseError

from api.models import CycleConfig, Participant
from draw.models import Draw, WinnerArchive
from guestlink.models import GuestToken
from guestlink.utils import issue_link

from .conftest import CYCLE, MONTH, PASSWORD, make_client

pytestmark = pytest.mark.django_db

API = '/api/v1.0'
SLOT = {'cycle': CYCLE, 'month': MONTH}


def test_login_and_session(db, anon_api):
    make_client('admin', 'ADMIN@example.com')

    r = anon_api.post(f'{API}/login', {'username': 'admin', 'password': 'wrong'}, format='json')
    assert r.status_code in (401, 403)

    r = anon_api.post(f'{API}/login', {'username': 'admin', 'password': PASSWORD}, format='json')
    assert r.status_code == 200
    assert r.json()['role'] == 'admin'
    assert anon_api.get(f'{API}/session').json()['role'] == 'admin'

    assert anon_api.post(f'{API}/logout').status_code == 200
    assert anon_api.get(f'{API}/session').json() == {
        'role': 'viewer', 'email': None, 'cycle_id': None, 'month': None,
    }


def test_roles_from_allow_lists(editor_api, viewer_api):
    assert editor_api.get(f'{API}/session').json()['role'] == 'editor'
    assert viewer_api.get(f'{API}/session').json()['role'] == 'viewer'


def test_cycles(admin_api, viewer_api):
    assert viewer_api.get(f'{API}/cycles').json() == {'cycles': []}

    r = admin_api.post(f'{API}/cycles', {'name': '2027-2028'}, format='json')
    assert r.status_code == 201
    assert r.json() == {'cycles': ['2027-2028']}

    assert admin_api.post(f'{API}/cycles', {'name': '2027-2028'}, format='json').status_code == 409
    assert admin_api.post(f'{API}/cycles', {'name': '25-26'}, format='json').status_code == 400
    assert viewer_api.post(f'{API}/cycles', {'name': '2028-2029'}, format='json').status_code == 403


def test_participants(cycle, editor_api, viewer_api, anon_api):
    r = editor_api.post(f'{API}/participants/', {'cycle_id': CYCLE, 'name': 'Akshay'}, format='json')
    assert r.status_code == 201
    participant_id = r.json()['id']

    assert viewer_api.post(
        f'{API}/participants/', {'cycle_id': CYCLE, 'name': 'Maria'}, format='json',
    ).status_code == 403
    assert editor_api.post(
        f'{API}/participants/', {'cycle_id': CYCLE, 'name': ' '}, format='json',
    ).status_code == 400

    r = anon_api.get(f'{API}/participants/', {'cycle_id': CYCLE})
    assert [i['name'] for i in r.json()] == ['Akshay']
    assert anon_api.get(f'{API}/participants/', {'cycle_id': '2030-2031'}).json() == []

    assert editor_api.delete(f'{API}/participants/{participant_id}/').status_code == 400
    assert viewer_api.delete(f'{API}/participants/{participant_id}/?confirm=true').status_code == 403
    assert editor_api.delete(f'{API}/participants/{participant_id}/?confirm=true').status_code == 204
    assert editor_api.delete(f'{API}/participants/{participant_id}/?confirm=true').status_code == 404


def test_trigger_and_reset(roster, admin_api, editor_api, anon_api):
    assert editor_api.post(f'{API}/draws/trigger', SLOT, format='json').status_code == 403

    r = admin_api.post(f'{API}/draws/trigger', SLOT, format='json')
    assert r.status_code == 201
    assert r.json()['id'] == '2025-2026_November2025'
    assert r.json()['winner_name'] in ('A', 'B', 'C')

    assert admin_api.post(f'{API}/draws/trigger', SLOT, format='json').status_code == 409

    state = anon_api.get(f'{API}/draws/state', SLOT).json()
    assert state['state'] == 'resolved'
    assert state['is_spinning'] is False
    assert state['draw']['id'] == '2025-2026_November2025'

    history = anon_api.get(f'{API}/draws/', {'cycle_id': CYCLE}).json()
    assert [i['id'] for i in history] == ['2025-2026_November2025']

    assert editor_api.post(f'{API}/draws/reset', SLOT, format='json').status_code == 403
    r = admin_api.post(f'{API}/draws/reset', SLOT, format='json')
    assert r.status_code == 200
    assert r.json() == {'reset': True}
    assert anon_api.get(f'{API}/draws/state', SLOT).json()['state'] == 'no_draw'


def test_trigger_with_delay_is_accepted(roster, admin_api, settings, monkeypatch):
    started = []
    monkeypatch.setattr('draw.engine.threading.Timer.start', lambda timer: started.append(timer))
    settings.LUCKYDRAW_SPIN_DELAY = 3

    r = admin_api.post(f'{API}/draws/trigger', SLOT, format='json')
    assert r.status_code == 202
    assert r.json() == {'state': 'spinning', 'delay': 3.0}
    assert len(started) == 1
    assert not Draw.objects.exists()


def test_trigger_empty_roster(cycle, admin_api):
    assert admin_api.post(f'{API}/draws/trigger', SLOT, format='json').status_code == 400


def test_guest_link_flow(roster, admin_api, anon_api, viewer_api):
    r = admin_api.post(f'{API}/guest/links', SLOT, format='json')
    assert r.status_code == 201
    token = r.json()['token']
    assert r.json()['url'] == f'https://draw.example.com/?token={token}'

    assert viewer_api.post(f'{API}/guest/links', SLOT, format='json').status_code == 403
    assert [i['token'] for i in admin_api.get(f'{API}/guest/links').json()] == [token]

    assert anon_api.get(f'{API}/guest/validate', {'token': 'nope'}).status_code == 403
    r = anon_api.get(f'{API}/guest/validate', {'token': token})
    assert r.status_code == 200
    assert r.json() == {'role': 'guest', 'email': None, 'cycle_id': CYCLE, 'month': MONTH}

    other = {'cycle': CYCLE, 'month': 'December 2025'}
    assert anon_api.post(f'{API}/draws/trigger', other, format='json').status_code == 403

    # Revoking does not take rights away from a session that already validated.
    assert admin_api.delete(f'{API}/guest/links/{token}').status_code == 204
    assert admin_api.delete(f'{API}/guest/links/{token}').status_code == 404
    assert anon_api.post(f'{API}/draws/trigger', SLOT, format='json').status_code == 201


def test_guest_link_expired(admin, anon_api):
    guest_token = issue_link(admin, CYCLE, MONTH)
    GuestToken.objects.filter(pk=guest_token.pk).update(
        expires_at=guest_token.created_at - datetime.timedelta(seconds=1),
    )
    r = anon_api.post(f'{API}/guest/validate', {'token': guest_token.token}, format='json')
    assert r.status_code == 403
    assert anon_api.get(f'{API}/session').json()['role'] == 'viewer'


def test_legacy_guest(roster, anon_api, settings):
    assert anon_api.get(f'{API}/guest/validate', {'guest': 'true'}).status_code == 403
    assert anon_api.get(f'{API}/guest/validate').status_code == 400

    settings.LUCKYDRAW_ALLOW_LEGACY_GUEST = True
    r = anon_api.get(f'{API}/guest/validate', {'guest': 'true'})
    assert r.status_code == 200
    assert r.json()['role'] == 'guest'
    assert anon_api.post(
        f'{API}/draws/trigger', {'cycle': CYCLE, 'month': 'March 2026'}, format='json',
    ).status_code == 201


def test_guest_link_qrcode(admin, admin_api, viewer_api):
    guest_token = issue_link(admin, CYCLE, MONTH)
    r = admin_api.get(f'{API}/guest/links/{guest_token.token}/qrcode')
    assert r.status_code == 200
    assert r['Content-Type'] == 'image/svg+xml'
    assert b'<svg' in r.content

    assert viewer_api.get(f'{API}/guest/links/{guest_token.token}/qrcode').status_code == 403
    assert admin_api.get(f'{API}/guest/links/missing/qrcode').status_code == 404


class TestServerlessHandlers:

    def test_get_participants(self, roster, anon_api):
        r = anon_api.get('/.netlify/functions/get-participants')
        assert r.status_code == 200
        assert [i['name'] for i in r.json()] == ['A', 'B', 'C']
        assert anon_api.post('/.netlify/functions/get-participants').status_code == 405

    def test_get_participants_store_failure(self, anon_api, monkeypatch):
        def fail(*args, **kwargs):
            raise DatabaseError('connection refused')

        monkeypatch.setattr(Participant.objects, 'all', fail)
        r = anon_api.get('/.netlify/functions/get-participants')
        assert r.status_code == 500
        assert r.json() == {'error': 'connection refused'}

    def test_add_participant(self, cycle, anon_api):
        r = anon_api.post(
            '/.netlify/functions/add-participant', {'name': 'Test', 'month': 'December'}, format='json',
        )
        assert r.status_code == 200
        assert r.json()['name'] == 'Test'
        assert r.json()['draw_month'] == 'December'
        assert Participant.objects.get().cycle_id == CYCLE

        r = anon_api.post('/.netlify/functions/add-participant', {'name': 'Test'}, format='json')
        assert r.status_code == 400
        assert r.json() == 'Name and month are required.'
        assert anon_api.get('/.netlify/functions/add-participant').status_code == 405

    def test_set_winner(self, roster, anon_api):
        payload = {'winnerId': roster[1].pk, 'winnerName': 'B', 'drawMonth': 'November'}
        r = anon_api.post('/api/v1.0/functions/set-winner', payload, format='json')
        assert r.status_code == 200
        assert r.json() == {'message': 'Winner saved successfully!'}

        assert Participant.objects.get(pk=roster[1].pk).is_winner is True
        archive = WinnerArchive.objects.get()
        assert (archive.winner_name, archive.draw_month) == ('B', 'November')
        assert archive.draw_year == datetime.date.today().year

        r = anon_api.post('/.netlify/functions/set-winner', {'winnerId': 1}, format='json')
        assert r.status_code == 400
        assert r.json() == 'Missing winner information.'
        assert anon_api.get('/.netlify/functions/set-winner').status_code == 405

    def test_body_that_is_not_an_object(self, cycle, anon_api):
        r = anon_api.post('/.netlify/functions/add-participant', [1, 2], format='json')
        assert r.status_code == 400
        assert r.json() == 'Name and month are required.'

        r = anon_api.post('/.netlify/functions/set-winner', ['B'], format='json')
        assert r.status_code == 400
        assert r.json() == 'Missing winner information.'
        assert not Participant.objects.exists()

    def test_set_winner_store_failure_rolls_back(self, roster, anon_api, monkeypatch):
        def fail(**kwargs):
            raise DatabaseError('insert failed')

        monkeypatch.setattr(WinnerArchive.objects, 'create', fail)
        payload = {'winnerId': roster[0].pk, 'winnerName': 'A', 'drawMonth': 'November'}
        r = anon_api.post('/.netlify/functions/set-winner', payload, format='json')
        assert r.status_code == 500
        assert r.json() == {'error': 'insert failed'}
        assert Participant.objects.get(pk=roster[0].pk).is_winner is False


def test_cycle_config_singleton(admin_api):
    admin_api.post(f'{API}/cycles', {'name': '2025-2026'}, format='json')
    CycleConfig.load().delete()
    assert CycleConfig.load().cycles == ['2025-2026']
