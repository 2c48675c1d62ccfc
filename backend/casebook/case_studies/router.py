# backend/casebook/case_studies/router.py
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
from .models import CaseStudy, CaseStudyCategory, Difficulty
from .schemas import CaseStudyCreate, CaseStudyEnvelope, CaseStudyOut, CaseStudyUpdate

router = APIRouter(prefix="/case-studies", tags=["case-studies"])


@router.get("", response_model=Paginated[CaseStudyOut])
async def list_case_studies(
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    category: Optional[CaseStudyCategory] = None,
    industry: Optional[str] = None,
    difficulty: Optional[Difficulty] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    sort: SortOrder = SortOrder.NEWEST,
):
    items, total = await repository.list_content(
        db,
        CaseStudy,
        filters={
            "category": category.value if category else None,
            "industry": industry,
            "difficulty": difficulty.value if difficulty else None,
        },
        tag=tag,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )
    return paginated(items, total, page, limit)


@router.get("/{slug}", response_model=CaseStudyOut)
async def get_case_study(slug: str, db: SessionDep, reader: Optional[User] = OptionalUser):
    return await service.read_published(db, CaseStudy, slug, reader)


@router.post("", response_model=CaseStudyEnvelope, status_code=status.HTTP_201_CREATED)
async def create_case_study(body: CaseStudyCreate, db: SessionDep, author: User = Depends(require_author)):
    case_study = await service.create_content(db, CaseStudy, body, author)
    return CaseStudyEnvelope(
        message="Case study created successfully",
        case_study=CaseStudyOut.model_validate(case_study),
    )


@router.put("/{case_study_id}", response_model=CaseStudyEnvelope)
async def update_case_study(
    case_study_id: int, body: CaseStudyUpdate, db: SessionDep, current_user: User = CurrentUser
):
    case_study = await service.update_content(db, CaseStudy, case_study_id, body, current_user)
    return CaseStudyEnvelope(
        message="Case study updated successfully",
        case_study=CaseStudyOut.model_validate(case_study),
    )


@router.delete("/{case_study_id}", response_model=MessageResponse)
async def delete_case_study(case_study_id: int, db: SessionDep, current_user: User = CurrentUser):
    await service.delete_content(db, CaseStudy, case_study_id, current_user)
    return MessageResponse(message="Case study deleted successfully")


@router.post("/{case_study_id}/like", response_model=CounterResponse)
async def like_case_study(case_study_id: int, db: SessionDep, current_user: User = CurrentUser):
    value = await service.engage(db, CaseStudy, case_study_id, "likes", InteractionKind.LIKE, current_user)
    return CounterResponse(id=case_study_id, counter="likes", value=value)


@router.post("/{case_study_id}/bookmark", response_model=CounterResponse)
async def bookmark_case_study(case_study_id: int, db: SessionDep, current_user: User = CurrentUser):
    value = await service.engage(db, CaseStudy, case_study_id, "bookmarks", InteractionKind.BOOKMARK, current_user)
    return CounterResponse(id=case_study_id, counter="bookmarks", value=value)


@router.post("/{case_study_id}/share", response_model=CounterResponse)
async def share_case_study(case_study_id: int, db: SessionDep, user: Optional[User] = OptionalUser):
    value = await service.engage(db, CaseStudy, case_study_id, "shares", InteractionKind.SHARE, user)
    return CounterResponse(id=case_study_id, counter="shares", value=value)


@router.post("/{case_study_id}/download", response_model=CounterResponse)
async def download_case_study(case_study_id: int, db: SessionDep, user: Optional[User] = OptionalUser):
    value = await service.engage(db, CaseStudy, case_study_id, "downloads", InteractionKind.DOWNLOAD, user)
    return CounterResponse(id=case_study_id, counter="downloads", value=value)
