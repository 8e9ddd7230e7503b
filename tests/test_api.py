import uuid


def test_api_movies(client, movie):
    payload = client.get('/api/movies').get_json()
    assert payload['success'] is True
    assert [m['title'] for m in payload['movies']] == ['Inception']
    assert payload['movies'][0]['rating'] == 8.8

    payload = client.get('/api/movies?genre=Drama').get_json()
    assert payload['movies'] == []


def test_api_movie_detail_includes_cast(client, backend, admin, movie):
    backend.add_cast_member(admin['user_id'], movie['movie_id'], 'Leonardo DiCaprio', 'Cobb')

    payload = client.get(f"/api/movie/{movie['movie_id']}").get_json()

    assert payload['movie']['title'] == 'Inception'
    assert [c['character'] for c in payload['movie']['cast']] == ['Cobb']


def test_api_movie_not_found(client):
    for movie_id in (str(uuid.uuid4()), 'bogus'):
        response = client.get(f'/api/movie/{movie_id}')
        assert response.status_code == 404
        assert response.get_json() == {'success': False, 'error': 'Movie not found'}


def test_api_movie_reviews_only_approved(client, backend, admin, movie):
    visible = backend.add_review(movie['movie_id'], 'Ana', 9)
    backend.update_review_approval(admin['user_id'], visible['review_id'], True)
    backend.add_review(movie['movie_id'], 'Ben', 3)

    payload = client.get(f"/api/movie/{movie['movie_id']}/reviews").get_json()

    assert [r['username'] for r in payload['reviews']] == ['Ana']
    assert all(r['is_approved'] for r in payload['reviews'])


def test_moderation_feed_requires_admin(app, user_client):
    response = app.test_client().get('/api/admin/reviews')
    assert response.status_code == 401

    response = user_client.get('/api/admin/reviews')
    assert response.status_code == 403


def test_moderation_feed(admin_client, backend, admin, movie):
    pending = backend.add_review(movie['movie_id'], 'Ana', 9)
    approved = backend.add_review(movie['movie_id'], 'Ben', 7)
    backend.update_review_approval(admin['user_id'], approved['review_id'], True)

    response = admin_client.get('/api/admin/reviews?status=pending')

    assert response.headers['Cache-Control'] == 'no-store'
    payload = response.get_json()
    assert [r['review_id'] for r in payload['reviews']] == [pending['review_id']]
    assert payload['reviews'][0]['movie_title'] == 'Inception'
    assert payload['counts'] == {'pending': 1, 'approved': 1}

    payload = admin_client.get('/api/admin/reviews?status=approved').get_json()
    assert [r['review_id'] for r in payload['reviews']] == [approved['review_id']]

    payload = admin_client.get('/api/admin/reviews').get_json()
    assert len(payload['reviews']) == 2


def test_moderation_feed_reflects_actions(admin_client, backend, movie):
    review = backend.add_review(movie['movie_id'], 'Ana', 9)
    admin_client.post(f"/admin/reviews/{review['review_id']}/approve", json={})

    payload = admin_client.get('/api/admin/reviews?status=pending').get_json()
    assert payload['reviews'] == []
    assert payload['counts'] == {'pending': 0, 'approved': 1}


def test_health(client):
    payload = client.get('/health').get_json()
    assert payload['status'] == 'healthy'
    assert payload['storage'] == 'aws_dynamodb'


def test_moderation_feed_scans_each_table_once(admin_client, backend, movie, monkeypatch):
    backend.add_review(movie['movie_id'], 'Ana', 9)
    scanned = []
    original_scan = backend._scan

    def counting_scan(name, *args, **kwargs):
        scanned.append(name)
        return original_scan(name, *args, **kwargs)

    monkeypatch.setattr(backend, '_scan', counting_scan)

    payload = admin_client.get('/api/admin/reviews?status=pending').get_json()

    assert len(payload['reviews']) == 1
    assert payload['counts'] == {'pending': 1, 'approved': 0}
    assert sorted(scanned) == ['movies', 'reviews']
