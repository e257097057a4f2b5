"""Tests for the OE Manuals REST API."""

import pytest

from oe_manuals.errors.manual import AssetStorageError

from conftest import manual_params


MANUAL_KEYS = {
    'id', 'videoLink', 'title', 'description', 'order', 'thumbnailPath'}


def create(client, upload=None, **overrides):
    kw = {}
    if upload is not None:
        kw['upload_files'] = [('thumbnail',) + upload]
    return client.post(
        '/oe_manuals', manual_params(**overrides), status=201, **kw).json


class TestCreate:
    """POST /oe_manuals"""

    def test_form(self, client):
        res = client.post('/oe_manuals', manual_params(), status=201)
        manual = res.json['data']
        assert set(manual) == MANUAL_KEYS
        assert manual['videoLink'] == 'https://videos.example.com/v1'
        assert manual['order'] == 1
        assert manual['thumbnailPath'] is None
        assert res.json['links']['self'].endswith('/oe_manuals')

    def test_json(self, client):
        res = client.post_json(
            '/oe_manuals', manual_params(order=0), status=201)
        assert res.json['data']['order'] == 0

    def test_query_string(self, client):
        res = client.post(
            '/oe_manuals?videoLink=v&title=T&description=D&order=3',
            status=201)
        assert res.json['data']['title'] == 'T'

    def test_with_thumbnail(self, client):
        manual = create(client, ('thumb.png', b'png data'))['data']
        path = manual['thumbnailPath']
        assert path.startswith('/uploads/') and path.endswith('.png')
        res = client.get(path)
        assert res.body == b'png data'
        assert res.content_type == 'image/png'

    def test_empty_file_part_ignored(self, client):
        manual = create(client, ('', b''))['data']
        assert manual['thumbnailPath'] is None

    @pytest.mark.parametrize('param', [
        'videoLink', 'title', 'description', 'order'])
    def test_missing_field(self, client, param):
        params = manual_params()
        del params[param]
        res = client.post('/oe_manuals', params, status=400)
        error = res.json['error']
        assert error['id'] == 'MissingFieldError'
        assert error['meta']['field'] in (
            'video_link', 'title', 'description', 'order')
        assert client.get('/oe_manuals').json['data'] == []

    def test_bad_order(self, client):
        res = client.post('/oe_manuals', manual_params(order='2.5'),
                          status=400)
        assert res.json['error']['id'] == 'ValidationError'
        assert res.json['error']['meta'] == {'field': 'order'}

    @pytest.mark.parametrize('order', [str(10**30), str(-2**63 - 1), '1_000'])
    def test_order_out_of_range_or_malformed(self, client, catalog, order):
        res = client.post(
            '/oe_manuals', manual_params(order=order),
            upload_files=[('thumbnail', 'thumb.png', b'data')], status=400)
        assert res.json['error']['id'] == 'ValidationError'
        assert res.json['error']['meta'] == {'field': 'order'}
        assert catalog.assets.refs() == []

    def test_duplicate_order(self, client, catalog):
        create(client)
        res = client.post(
            '/oe_manuals', manual_params(title='T2'),
            upload_files=[('thumbnail', 'thumb.png', b'data')], status=409)
        error = res.json['error']
        assert error['id'] == 'DuplicateManualOrderError'
        assert error['status'] == 'Conflict'
        assert error['meta'] == {'order': 1}
        assert len(client.get('/oe_manuals').json['data']) == 1
        assert catalog.assets.refs() == []

    def test_id_ignored(self, client):
        manual = create(client, id='100')['data']
        assert manual['id'] != 100


class TestGet:
    """GET /oe_manuals and GET /oe_manuals/<id>"""

    def test_list_empty(self, client):
        res = client.get('/oe_manuals')
        assert res.json['data'] == []

    def test_list_insertion_order(self, client):
        ids = [create(client, order=str(order))['data']['id']
               for order in (2, 1, 3)]
        manuals = client.get('/oe_manuals').json['data']
        assert [m['id'] for m in manuals] == ids
        assert [m['order'] for m in manuals] == [2, 1, 3]

    def test_get(self, client):
        manual = create(client)['data']
        res = client.get('/oe_manuals/{}'.format(manual['id']))
        assert res.json['data'] == manual

    @pytest.mark.parametrize('manual_id', [
        '1', '999', 'abc', str(10**30), '-' + str(10**30)])
    def test_unknown(self, client, manual_id):
        res = client.get('/oe_manuals/' + manual_id, status=404)
        assert res.json['error']['id'] == 'UnknownManualError'

    def test_unknown_thumbnail(self, client):
        res = client.get('/uploads/0123456789abcdef.png', status=404)
        assert res.json['error']['id'] == 'UnknownAssetError'

    def test_unknown_route(self, client):
        res = client.get('/no_such_resource', status=404)
        assert res.content_type == 'application/json'
        assert res.json['error']['id'] == 'NotFound'

    def test_method_not_allowed(self, client):
        client.patch('/oe_manuals', status=405)

    def test_cors(self, client):
        res = client.get(
            '/oe_manuals', headers={'Origin': 'https://admin.example.com'})
        # Wildcard or the echoed origin, depending on the Flask-Cors release
        assert res.headers['Access-Control-Allow-Origin'] in (
            '*', 'https://admin.example.com')


class TestUpdate:
    """PUT /oe_manuals/<id>"""

    def test_update_fields(self, client):
        manual = create(client)['data']
        url = '/oe_manuals/{}'.format(manual['id'])
        res = client.put(url, manual_params(title='T2', order='5'))
        assert res.json['data']['title'] == 'T2'
        assert res.json['data']['order'] == 5
        assert 'meta' not in res.json
        assert client.get(url).json['data']['title'] == 'T2'

    def test_json(self, client):
        manual = create(client)['data']
        res = client.put_json(
            '/oe_manuals/{}'.format(manual['id']),
            manual_params(description='D2', order=1))
        assert res.json['data']['description'] == 'D2'

    def test_replace_thumbnail(self, client):
        manual = create(client, ('old.png', b'old'))['data']
        old_path = manual['thumbnailPath']
        res = client.put(
            '/oe_manuals/{}'.format(manual['id']), manual_params(),
            upload_files=[('thumbnail', 'new.jpg', b'new')])
        new_path = res.json['data']['thumbnailPath']
        assert new_path != old_path
        assert client.get(new_path).body == b'new'
        client.get(old_path, status=404)

    def test_keep_thumbnail(self, client):
        manual = create(client, ('old.png', b'old'))['data']
        res = client.put(
            '/oe_manuals/{}'.format(manual['id']), manual_params(title='T2'))
        assert res.json['data']['thumbnailPath'] == manual['thumbnailPath']
        assert client.get(manual['thumbnailPath']).body == b'old'

    def test_missing_field(self, client):
        manual = create(client)['data']
        params = manual_params()
        del params['videoLink']
        res = client.put(
            '/oe_manuals/{}'.format(manual['id']), params, status=400)
        assert res.json['error']['meta'] == {'field': 'video_link'}

    def test_order_conflict(self, client):
        create(client, order='1')
        manual = create(client, order='2')['data']
        res = client.put(
            '/oe_manuals/{}'.format(manual['id']), manual_params(order='1'),
            status=409)
        assert res.json['error']['id'] == 'DuplicateManualOrderError'

    def test_unknown(self, client):
        client.put('/oe_manuals/42', manual_params(), status=404)
        client.put('/oe_manuals/' + str(10**30), manual_params(), status=404)
        client.delete('/oe_manuals/' + str(10**30), status=404)

    def test_cleanup_failure_reported(self, client, catalog, monkeypatch):
        manual = create(client, ('old.png', b'old'))['data']

        def fail(_):
            raise AssetStorageError(reason='permission denied')
        monkeypatch.setattr(catalog.assets, 'delete', fail)

        res = client.put(
            '/oe_manuals/{}'.format(manual['id']), manual_params(title='T2'),
            upload_files=[('thumbnail', 'new.png', b'new')])
        assert res.status_int == 200
        assert res.json['data']['title'] == 'T2'
        cleanup = res.json['meta']['thumbnail_cleanup']
        assert cleanup['removed'] is False
        assert 'permission denied' in cleanup['error']
        assert manual['thumbnailPath'].endswith(cleanup['asset'])


class TestDelete:
    """DELETE /oe_manuals/<id>"""

    def test_delete(self, client):
        manual = create(client, ('thumb.png', b'data'))['data']
        url = '/oe_manuals/{}'.format(manual['id'])
        res = client.delete(url)
        assert res.json['data'] == manual
        client.get(url, status=404)
        client.get(manual['thumbnailPath'], status=404)
        client.delete(url, status=404)

    def test_cleanup_failure_reported(self, client, catalog, monkeypatch):
        manual = create(client, ('thumb.png', b'data'))['data']

        def fail(_):
            raise OSError('read-only filesystem')
        monkeypatch.setattr(catalog.assets, 'delete', fail)

        res = client.delete('/oe_manuals/{}'.format(manual['id']))
        assert res.json['meta']['thumbnail_cleanup']['error'] == \
            'read-only filesystem'
        client.get('/oe_manuals/{}'.format(manual['id']), status=404)


class TestScenario:
    """Create, conflict, reorder, reuse the order, and delete over HTTP"""

    def test_order_slot_freed(self, client):
        id1 = create(client, videoLink='v1', title='T1', description='D1',
                     order='1')['data']['id']

        client.post('/oe_manuals', manual_params(
            videoLink='v2', title='T2', description='D2', order='1'),
            status=409)
        assert len(client.get('/oe_manuals').json['data']) == 1

        res = client.put('/oe_manuals/{}'.format(id1), manual_params(
            videoLink='v1', title='T1', description='D1', order='2'))
        assert res.json['data']['order'] == 2

        id2 = create(client, videoLink='v2', title='T2', description='D2',
                     order='1')['data']['id']
        assert id2 != id1

        client.delete('/oe_manuals/{}'.format(id1))
        client.get('/oe_manuals/{}'.format(id1), status=404)
        assert [m['id'] for m in client.get('/oe_manuals').json['data']] == \
            [id2]
