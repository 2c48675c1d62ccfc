# backend/casebook/blogs/router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..auth.dependencies import CurrentUser, OptionalUser, require_author
from ..database import SessionDep
from ..models import MessageResponse
from ..content import repository, service
from ..content.models import InteractionKind
from ..content.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Paginated, paginated
from ..content.schemas import CounterResponse, SortOrder
from ..users.models import User
from .models import Blog
from .schemas import BlogCreate, BlogEnvelope, BlogOut, BlogUpdate

router = APIRouter(prefix="/blogs", tags=["blogs"])


@router.get("", response_model=Paginated[BlogOut])
async def list_blogs(
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    category: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    sort: SortOrder = SortOrder.NEWEST,
):
    items, total = await repository.list_content(
        db,
        Blog,
        filters={"category": category},
        tag=tag,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )
    return paginated(items, total, page, limit)


@router.get("/{slug}", response_model=BlogOut)
async def get_blog(slug: str, db: SessionDep, reader: Optional[User] = OptionalUser):
    return await service.read_published(db, Blog, slug, reader)


@router.post("", response_model=BlogEnvelope, status_code=status.HTTP_201_CREATED)
async def create_blog(body: BlogCreate, db: SessionDep, author: User = Depends(require_author)):
    blog = await service.create_content(db, Blog, body, author)
    return BlogEnvelope(message="Blog post created successfully", blog=BlogOut.model_validate(blog))


@router.put("/{blog_id}", response_model=BlogEnvelope)
async def update_blog(blog_id: int, body: BlogUpdate, db: SessionDep, current_user: User = CurrentUser):
    blog = await service.update_content(db, Blog, blog_id, body, current_user)
    return BlogEnvelope(message="Blog post updated successfully", blog=BlogOut.model_validate(blog))


@router.delete("/{blog_id}", response_model=MessageResponse)
async def delete_blog(blog_id: int, db: SessionDep, current_user: User = CurrentUser):
    await service.delete_content(db, Blog, blog_id, current_user)
    return MessageResponse(message="Blog post deleted successfully")


@router.post("/{blog_id}/like", response_model=CounterResponse)
async def like_blog(blog_id: int, db: SessionDep, current_user: User = CurrentUser):
    value = await service.engage(db, Blog, blog_id, "likes", InteractionKind.LIKE, current_user)
    return CounterResponse(id=blog_id, counter="likes", value=value)


@router.post("/{blog_id}/bookmark", response_model=CounterResponse)
async def bookmark_blog(blog_id: int, db: SessionDep, current_user: User = CurrentUser):
    value = await service.engage(db, Blog, blog_id, "bookmarks", InteractionKind.BOOKMARK, current_user)
    return CounterResponse(id=blog_id, counter="bookmarks", value=value)


@router.post("/{blog_id}/share", response_model=CounterResponse)
async def share_blog(blog_id: int, db: SessionDep, user: Optional[User] = OptionalUser):
    value = await service.engage(db, Blog, blog_id, "shares", InteractionKind.SHARE, user)
    return CounterResponse(id=blog_id, counter="shares", value=value)
