"""
Tests for movie, category, banner and counts endpoints.
"""

from conftest import image_file, stored_files, video_file


class TestCategories:
    def test_create_with_image(self, client, admin_headers):
        response = client.post(
            "/api/category/v1/category",
            data={"name": "Drama"},
            files={"image": image_file()},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Category created successfully"
        assert body["data"]["name"] == "Drama"
        assert body["data"]["imageUrl"].startswith("images/")
        assert "createdAt" in body["data"]

    def test_duplicate_name_conflicts(self, client, admin_headers, category):
        response = client.post(
            "/api/category/v1/category", json={"name": category["name"]}, headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["data"] == {"field": "name"}

    def test_all_categories_ordered_by_name(self, client, admin_headers):
        for name in ("Thriller", "Comedy", "Drama"):
            client.post("/api/category/v1/category", json={"name": name}, headers=admin_headers)

        response = client.get("/api/category/v1/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()["data"]] == ["Comedy", "Drama", "Thriller"]

    def test_empty_listing_is_not_found(self, client):
        response = client.get("/api/category/v1/categories")

        assert response.status_code == 404
        assert response.json()["message"] == "No categories found"

    def test_paginated(self, client, admin_headers):
        for i in range(12):
            client.post(
                "/api/category/v1/category", json={"name": f"Genre {i:02d}"}, headers=admin_headers
            )

        response = client.get("/api/category/v1/categories/paginated?page=2&limit=5")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["currentPage"] == 2
        assert data["totalPages"] == 3
        assert data["totalCategories"] == 12
        assert [c["name"] for c in data["data"]] == [f"Genre {i:02d}" for i in range(5, 10)]

    def test_limit_out_of_range(self, client):
        response = client.get("/api/category/v1/categories/paginated?limit=500")

        assert response.status_code == 400
        assert response.json()["data"] == {"field": "limit"}

    def test_delete_referenced_category_conflicts(self, client, admin_headers, uploaded_movie):
        response = client.delete(
            f"/api/category/v1/category/{uploaded_movie['categoryId']}", headers=admin_headers
        )

        assert response.status_code == 409


class TestMovies:
    def test_create_uploaded_movie(self, uploaded_movie, category):
        assert uploaded_movie["name"] == "Night Train"
        assert uploaded_movie["status"] == "PENDING"
        assert uploaded_movie["categoryId"] == category["id"]
        assert uploaded_movie["category"]["name"] == category["name"]
        assert uploaded_movie["video"]["kind"] == "UPLOAD"
        assert uploaded_movie["video"]["path"].startswith("videos/")
        # Storage columns are folded into "video"
        assert "videoPath" not in uploaded_movie
        assert "videoUrl" not in uploaded_movie

    def test_create_linked_movie(self, client, admin_headers, category):
        response = client.post(
            "/api/movie/v1/movie",
            data={
                "name": "Live Feed",
                "description": "Stream",
                "categoryId": category["id"],
                "videoSource": "LINK",
                "videoUrl": "https://cdn.example.com/live.m3u8",
            },
            files={"image": image_file()},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["video"] == {
            "kind": "LINK",
            "url": "https://cdn.example.com/live.m3u8",
        }

    def test_invalid_category_leaves_no_files(self, client, admin_headers, media_dir):
        response = client.post(
            "/api/movie/v1/movie",
            data={"name": "Lost", "description": "x", "categoryId": "no-such-category"},
            files={"image": image_file(), "movie": video_file()},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "The specified category ID does not exist"
        assert stored_files(media_dir) == []

    def test_missing_poster(self, client, admin_headers, category, media_dir):
        response = client.post(
            "/api/movie/v1/movie",
            data={"name": "A", "description": "x", "categoryId": category["id"]},
            files={"movie": video_file()},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["data"] == {"field": "image"}
        assert stored_files(media_dir) == []

    def test_wrong_file_type(self, client, admin_headers, category, media_dir):
        response = client.post(
            "/api/movie/v1/movie",
            data={"name": "A", "description": "x", "categoryId": category["id"]},
            files={"image": video_file(), "movie": video_file()},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == '"image" must be an image file'
        assert stored_files(media_dir) == []

    def test_oversized_video(self, client, admin_headers, category, media_dir, test_config):
        big = ("big.mp4", b"\x00" * (test_config.max_video_size + 1), "video/mp4")

        response = client.post(
            "/api/movie/v1/movie",
            data={"name": "A", "description": "x", "categoryId": category["id"]},
            files={"image": image_file(), "movie": big},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["data"] == {"field": "movie"}
        assert stored_files(media_dir) == []

    def test_get_movie(self, client, uploaded_movie):
        response = client.get(f"/api/movie/v1/movie/{uploaded_movie['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == uploaded_movie

    def test_get_unknown_movie(self, client):
        response = client.get("/api/movie/v1/movie/missing")

        assert response.status_code == 404
        assert response.json()["message"] == "Movie not found"

    def test_update_replaces_poster(self, client, admin_headers, uploaded_movie, media_dir):
        old_poster = media_dir / uploaded_movie["imageUrl"]
        assert old_poster.is_file()

        response = client.put(
            f"/api/movie/v1/movie/{uploaded_movie['id']}",
            data={"status": "PUBLISHED"},
            files={"image": image_file("new.png")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "PUBLISHED"
        assert data["name"] == uploaded_movie["name"]
        assert data["imageUrl"] != uploaded_movie["imageUrl"]
        assert not old_poster.exists()
        assert (media_dir / data["imageUrl"]).is_file()

    def test_update_with_null_required_field(self, client, admin_headers, uploaded_movie):
        response = client.put(
            f"/api/movie/v1/movie/{uploaded_movie['id']}",
            json={"name": None},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == '"name" must not be null'

    def test_empty_update_rejected(self, client, admin_headers, uploaded_movie):
        response = client.put(
            f"/api/movie/v1/movie/{uploaded_movie['id']}", json={}, headers=admin_headers
        )

        assert response.status_code == 400

    def test_delete_removes_files(self, client, admin_headers, uploaded_movie, media_dir):
        response = client.delete(
            f"/api/movie/v1/movie/{uploaded_movie['id']}", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["id"] == uploaded_movie["id"]
        assert stored_files(media_dir) == []
        assert client.get(f"/api/movie/v1/movie/{uploaded_movie['id']}").status_code == 404

    def test_list_filters_and_search(self, client, admin_headers, category, uploaded_movie):
        client.post(
            "/api/movie/v1/movie",
            data={
                "name": "Morning Glory",
                "description": "Comedy",
                "categoryId": category["id"],
                "status": "PUBLISHED",
                "videoSource": "LINK",
                "videoUrl": "https://cdn.example.com/a.m3u8",
            },
            files={"image": image_file()},
            headers=admin_headers,
        )

        published = client.get("/api/movie/v1/movies?status=PUBLISHED").json()["data"]
        searched = client.get("/api/movie/v1/movies?query=night").json()["data"]
        everything = client.get(f"/api/movie/v1/movies?categoryId={category['id']}").json()["data"]

        assert [m["name"] for m in published["data"]] == ["Morning Glory"]
        assert [m["name"] for m in searched["data"]] == ["Night Train"]
        assert everything["totalMovies"] == 2

    def test_list_sort_by_camel_case_column(self, client, admin_headers, category, uploaded_movie):
        response = client.get("/api/movie/v1/movies?sort=-createdAt")

        assert response.status_code == 200

    def test_list_unknown_sort(self, client, uploaded_movie):
        response = client.get("/api/movie/v1/movies?sort=password")

        assert response.status_code == 400
        assert response.json()["data"] == {"field": "sort"}

    def test_list_no_match(self, client, uploaded_movie):
        response = client.get("/api/movie/v1/movies?query=zzz")

        assert response.status_code == 404
        assert response.json()["message"] == "No movies found"


class TestBanners:
    def _create(self, client, admin_headers, status="1"):
        response = client.post(
            "/api/banner/v1/banner",
            data={"status": status},
            files={"image": image_file("banner.png")},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    def test_image_required(self, client, admin_headers):
        response = client.post(
            "/api/banner/v1/banner", data={"status": "1"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["data"] == {"field": "image"}

    def test_status_must_be_zero_or_one(self, client, admin_headers, media_dir):
        response = client.post(
            "/api/banner/v1/banner",
            data={"status": "2"},
            files={"image": image_file()},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert stored_files(media_dir) == []

    def test_length_caps_listing(self, client, admin_headers):
        for _ in range(3):
            self._create(client, admin_headers)

        response = client.get("/api/banner/v1/banners?length=2")

        assert response.status_code == 200
        assert len(response.json()["data"]) == 2

    def test_status_filter(self, client, admin_headers):
        self._create(client, admin_headers, status="1")
        hidden = self._create(client, admin_headers, status="0")

        response = client.get("/api/banner/v1/banners?status=0")

        assert [b["id"] for b in response.json()["data"]] == [hidden["id"]]

    def test_no_banners(self, client):
        response = client.get("/api/banner/v1/banners")

        assert response.status_code == 404


class TestCounts:
    def test_counts(self, client, admin_headers, uploaded_movie, service, user):
        response = client.get("/api/counts/v1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {
            "movies": 1,
            "categories": 1,
            "banners": 0,
            "users": 1,
            "services": 1,
            "packages": 0,
            "bookings": 0,
            "enquiries": 0,
        }

    def test_counts_require_admin(self, client):
        assert client.get("/api/counts/v1").status_code == 401
