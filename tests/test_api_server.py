import base64
from io import BytesIO

import pytest

from api_server import create_app
from pipeline.icon_resizer import FailurePolicy

from conftest import decode_png_pixels


@pytest.fixture
def client():
    app = create_app(sizes=[64, 32, 16], failure_policy=FailurePolicy.ABORT)
    app.config['TESTING'] = True
    return app.test_client()


def upload(client, data, filename, content_type, **form):
    payload = {'image': (BytesIO(data), filename, content_type)}
    payload.update(form)
    return client.post('/api/resize', data=payload, content_type='multipart/form-data')


def data_url_pixels(data_url):
    prefix = 'data:image/png;base64,'
    assert data_url.startswith(prefix)
    return decode_png_pixels(base64.b64decode(data_url[len(prefix):]))


def test_resize_png(client, logo_png):
    resp = upload(client, logo_png, 'logo.png', 'image/png')

    assert resp.status_code == 200
    body = resp.get_json()
    assert body['success'] is True
    assert body['sizes'] == [64, 32, 16]
    assert [item['filename'] for item in body['images']] == [
        'resized_64x64.png', 'resized_32x32.png', 'resized_16x16.png',
    ]
    for item in body['images']:
        assert data_url_pixels(item['data_url']).shape == (item['size'], item['size'], 4)
    assert (body['preview']['width'], body['preview']['height']) == (100, 50)
    assert body['failures'] == {}


def test_resize_svg_without_declared_type(client, logo_svg):
    resp = upload(client, logo_svg.encode('utf-8'), 'logo.svg', 'application/octet-stream')
    assert resp.status_code == 200
    assert resp.get_json()['sizes'] == [64, 32, 16]


def test_sizes_override(client, logo_png):
    resp = upload(client, logo_png, 'logo.png', 'image/png', sizes='48, 24')
    assert resp.status_code == 200
    assert resp.get_json()['sizes'] == [48, 24]


@pytest.mark.parametrize('sizes', ['abc', '0', '-8'])
def test_invalid_sizes(client, logo_png, sizes):
    resp = upload(client, logo_png, 'logo.png', 'image/png', sizes=sizes)
    assert resp.status_code == 400


def test_text_file_is_rejected(client):
    resp = upload(client, b'hello', 'notes.txt', 'text/plain')
    assert resp.status_code == 415
    assert resp.get_json()['error'] == 'unsupported_format'


def test_broken_png_is_decode_error(client):
    resp = upload(client, b'\x89PNG\r\n\x1a\ngarbage', 'broken.png', 'image/png')
    assert resp.status_code == 422
    assert resp.get_json()['error'] == 'decode_error'


def test_missing_file(client):
    resp = client.post('/api/resize', data={'sizes': '16'}, content_type='multipart/form-data')
    assert resp.status_code == 400


def test_health(client):
    resp = client.get('/api/health')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['status'] == 'healthy'
    assert body['sizes'] == [64, 32, 16]
    assert body['failure_policy'] == 'abort'


def test_sizes_above_maximum_are_rejected(logo_png):
    client = create_app(sizes=[16], max_target_size=128).test_client()
    resp = upload(client, logo_png, 'logo.png', 'image/png', sizes='64,100000')
    assert resp.status_code == 400
    assert '100000' in resp.get_json()['message']


def test_configured_sizes_above_maximum_fail_at_startup():
    with pytest.raises(ValueError):
        create_app(sizes=[2048], max_target_size=1024)


def test_encode_error_is_500(client, logo_png, break_encoding):
    break_encoding(32)
    resp = upload(client, logo_png, 'logo.png', 'image/png')
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error'] == 'encode_error'
    assert body['success'] is False


def test_isolated_failure_keeps_other_sizes(logo_png, break_encoding):
    break_encoding(32)
    client = create_app(sizes=[64, 32, 16], failure_policy=FailurePolicy.ISOLATE).test_client()

    resp = upload(client, logo_png, 'logo.png', 'image/png')

    assert resp.status_code == 200
    body = resp.get_json()
    assert body['success'] is False
    assert body['sizes'] == [64, 16]
    assert list(body['failures'].keys()) == ['32']


def test_every_size_failing_is_500(logo_png, break_encoding):
    break_encoding(64, 32, 16)
    client = create_app(sizes=[64, 32, 16], failure_policy=FailurePolicy.ISOLATE).test_client()

    resp = upload(client, logo_png, 'logo.png', 'image/png')

    assert resp.status_code == 500
    body = resp.get_json()
    assert body['images'] == []
    assert sorted(body['failures'].keys()) == ['16', '32', '64']


def test_upload_too_large(logo_png):
    app = create_app(sizes=[16])
    app.config['MAX_CONTENT_LENGTH'] = 64
    resp = upload(app.test_client(), logo_png, 'logo.png', 'image/png')

    assert resp.status_code == 413
    assert resp.get_json()['success'] is False
