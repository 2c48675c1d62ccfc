from sqlalchemy import func, select

from casebook.content.models import ContentInteraction, ContentType
from conftest import auth_header, blog_payload


async def test_create_blog_derives_slug_and_read_time(create_blog):
    blog = await create_blog("How Netflix Scales Video Streaming")
    assert blog["slug"] == "how-netflix-scales-video-streaming"
    assert blog["readTime"] == 1
    assert blog["status"] == "published"
    assert blog["publishedAt"] is not None
    assert blog["authorName"] == "Alice Author"
    assert blog["views"] == blog["likes"] == blog["shares"] == blog["bookmarks"] == 0


async def test_plain_user_cannot_create_blog(client, user_token):
    response = await client.post("/api/blogs", json=blog_payload(), headers=auth_header(user_token))
    assert response.status_code == 403


async def test_anonymous_cannot_create_blog(client):
    response = await client.post("/api/blogs", json=blog_payload())
    assert response.status_code == 401


async def test_create_blog_validation(client, author_token):
    response = await client.post(
        "/api/blogs",
        json=blog_payload(title="Hey", content="too short"),
        headers=auth_header(author_token),
    )
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"title", "content"} <= fields


async def test_title_without_letters_is_rejected(client, author_token):
    response = await client.post("/api/blogs", json=blog_payload(title="!!!!!"), headers=auth_header(author_token))
    assert response.status_code == 400


async def test_duplicate_title_conflicts(client, create_blog, author_token):
    await create_blog("How Netflix Scales Video Streaming")
    response = await client.post(
        "/api/blogs",
        json=blog_payload("How Netflix Scales  Video Streaming!"),
        headers=auth_header(author_token),
    )
    assert response.status_code == 409
    assert response.json()["error"] == "Duplicate slug"


async def test_get_by_slug_counts_views(client, create_blog):
    blog = await create_blog()
    for expected in (1, 2, 3):
        response = await client.get(f"/api/blogs/{blog['slug']}")
        assert response.status_code == 200
        assert response.json()["views"] == expected


async def test_draft_is_hidden_from_public(client, create_blog):
    draft = await create_blog("Unfinished Thoughts On Design", status="draft")
    assert draft["publishedAt"] is None

    assert (await client.get(f"/api/blogs/{draft['slug']}")).status_code == 404
    listing = await client.get("/api/blogs")
    assert listing.json()["totalItems"] == 0


async def test_missing_slug_is_404(client):
    response = await client.get("/api/blogs/does-not-exist")
    assert response.status_code == 404
    assert response.json()["message"] == "Blog post not found"


async def test_list_pagination_second_page(client, create_blog):
    for i in range(25):
        await create_blog(f"Engineering Notes Part {i:02d}")

    response = await client.get("/api/blogs", params={"page": 2, "limit": 10})
    assert response.status_code == 200
    body = response.json()
    assert len(body["items"]) == 10
    assert body["currentPage"] == 2
    assert body["totalPages"] == 3
    assert body["totalItems"] == 25
    assert body["hasNextPage"] is True
    assert body["hasPrevPage"] is True


async def test_list_limit_bounds(client):
    assert (await client.get("/api/blogs", params={"limit": 51})).status_code == 400
    assert (await client.get("/api/blogs", params={"page": 0})).status_code == 400


async def test_list_filters_by_tag_search_and_category(client, create_blog):
    await create_blog("Scaling Postgres For Fun", tags=["databases"], category="engineering")
    await create_blog("Designing Friendly Forms", tags=["ux"], category="design")

    by_tag = (await client.get("/api/blogs", params={"tag": "databases"})).json()
    assert [item["title"] for item in by_tag["items"]] == ["Scaling Postgres For Fun"]

    by_search = (await client.get("/api/blogs", params={"search": "friendly"})).json()
    assert [item["title"] for item in by_search["items"]] == ["Designing Friendly Forms"]

    by_category = (await client.get("/api/blogs", params={"category": "engineering"})).json()
    assert by_category["totalItems"] == 1


async def test_popular_sort_orders_by_views(client, create_blog):
    quiet = await create_blog("A Quiet Little Post")
    loud = await create_blog("A Very Popular Post")
    await client.get(f"/api/blogs/{loud['slug']}")
    await client.get(f"/api/blogs/{loud['slug']}")
    await client.get(f"/api/blogs/{quiet['slug']}")

    body = (await client.get("/api/blogs", params={"sort": "popular"})).json()
    assert [item["id"] for item in body["items"]] == [loud["id"], quiet["id"]]


async def test_update_rederives_slug_and_keeps_published_at(client, create_blog, author_token):
    blog = await create_blog()
    response = await client.put(
        f"/api/blogs/{blog['id']}",
        json={"title": "Netflix Streaming Revisited", "status": "archived"},
        headers=auth_header(author_token),
    )
    assert response.status_code == 200
    updated = response.json()["blog"]
    assert updated["slug"] == "netflix-streaming-revisited"
    assert updated["publishedAt"] == blog["publishedAt"]

    republished = await client.put(
        f"/api/blogs/{blog['id']}", json={"status": "published"}, headers=auth_header(author_token)
    )
    assert republished.json()["blog"]["publishedAt"] == blog["publishedAt"]


async def test_only_owner_or_admin_can_modify(client, create_blog, register, admin_token):
    blog = await create_blog()
    other = (await register(name="Other Person", email="other@example.com"))["token"]

    forbidden = await client.put(
        f"/api/blogs/{blog['id']}", json={"featured": True}, headers=auth_header(other)
    )
    assert forbidden.status_code == 403
    assert (await client.delete(f"/api/blogs/{blog['id']}", headers=auth_header(other))).status_code == 403

    by_admin = await client.put(
        f"/api/blogs/{blog['id']}", json={"featured": True}, headers=auth_header(admin_token)
    )
    assert by_admin.status_code == 200
    assert by_admin.json()["blog"]["featured"] is True


async def test_delete_blog(client, create_blog, author_token):
    blog = await create_blog()
    response = await client.delete(f"/api/blogs/{blog['id']}", headers=auth_header(author_token))
    assert response.status_code == 200
    assert (await client.get(f"/api/blogs/{blog['slug']}")).status_code == 404
    again = await client.delete(f"/api/blogs/{blog['id']}", headers=auth_header(author_token))
    assert again.status_code == 404


async def test_engagement_counters(client, create_blog, user_token):
    blog = await create_blog()

    # like / bookmark 은 로그인 필요
    assert (await client.post(f"/api/blogs/{blog['id']}/like")).status_code == 401

    like = await client.post(f"/api/blogs/{blog['id']}/like", headers=auth_header(user_token))
    assert like.status_code == 200
    assert like.json() == {"id": blog["id"], "counter": "likes", "value": 1}

    # 같은 사용자의 반복 호출도 그대로 증가
    again = await client.post(f"/api/blogs/{blog['id']}/like", headers=auth_header(user_token))
    assert again.json()["value"] == 2

    share = await client.post(f"/api/blogs/{blog['id']}/share")
    assert share.json()["value"] == 1

    missing = await client.post("/api/blogs/9999/share")
    assert missing.status_code == 404


async def test_netflix_title_slug_and_resave_keeps_slug(client, create_blog, author_token):
    blog = await create_blog("How Netflix Transformed Content")
    assert blog["slug"] == "how-netflix-transformed-content"

    resaved = await client.put(
        f"/api/blogs/{blog['id']}",
        json={"description": "An updated description for the same post."},
        headers=auth_header(author_token),
    )
    assert resaved.json()["blog"]["slug"] == "how-netflix-transformed-content"

    duplicate = await client.post(
        "/api/blogs", json=blog_payload("How Netflix Transformed Content"), headers=auth_header(author_token)
    )
    assert duplicate.status_code == 409


async def test_page_sizes_add_up_to_total(client, create_blog):
    for i in range(7):
        await create_blog(f"Short Series Entry {i}")

    seen = []
    page = 1
    while True:
        body = (await client.get("/api/blogs", params={"page": page, "limit": 3})).json()
        seen.extend(item["id"] for item in body["items"])
        assert body["hasNextPage"] is (body["currentPage"] < body["totalPages"])
        if not body["hasNextPage"]:
            break
        page += 1

    assert len(seen) == len(set(seen)) == body["totalItems"] == 7


async def test_search_is_literal_substring(client, create_blog):
    await create_blog("Plain Ordinary Article Title", tags=["cx"])

    async def total(**params):
        return (await client.get("/api/blogs", params=params)).json()["totalItems"]

    assert await total(search="ordinary") == 1
    # LIKE 와일드카드는 문자 그대로 비교
    assert await total(search="o_d") == 0
    assert await total(search="%") == 0
    assert await total(tag="c_") == 0
    assert await total(tag="CX") == 1


async def test_delete_blog_clears_its_interactions(client, create_blog, author_token, user_token, session_factory):
    blog = await create_blog()
    await client.get(f"/api/blogs/{blog['slug']}", headers=auth_header(user_token))
    await client.post(f"/api/blogs/{blog['id']}/bookmark", headers=auth_header(user_token))

    response = await client.delete(f"/api/blogs/{blog['id']}", headers=auth_header(author_token))
    assert response.status_code == 200

    async with session_factory() as session:
        remaining = (await session.execute(
            select(func.count()).select_from(ContentInteraction).where(
                ContentInteraction.content_type == ContentType.BLOG,
                ContentInteraction.content_id == blog["id"],
            )
        )).scalar_one()
    assert remaining == 0
