# juliecraft/api/endpoints/content.py

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from juliecraft.api.endpoints.auth import require_admin
from juliecraft.core.errors import NotFoundError, ValidationError
from juliecraft.core.permissions import Authorized
from juliecraft.database import get_db
from juliecraft.models.content import FooterContent, HomepageSection
from juliecraft.schemas.auth import MessageResponse
from juliecraft.schemas.content import (
    FooterBlockOut,
    FooterReplace,
    HomepageSectionCreate,
    HomepageSectionOut,
    HomepageSectionUpdate,
)

router = APIRouter()


def _section_or_404(db: Session, section_id: UUID) -> HomepageSection:
    section = db.get(HomepageSection, section_id)
    if section is None:
        raise NotFoundError("Section not found")
    return section


# -------------------------------------------------------------------
# Homepage sections
# -------------------------------------------------------------------

@router.get("/homepage-sections")
def list_homepage_sections(db: Session = Depends(get_db)):
    sections = (
        db.query(HomepageSection)
        .order_by(HomepageSection.sort_order.asc(), HomepageSection.created_at.desc())
        .all()
    )
    return {"sections": [HomepageSectionOut.model_validate(s) for s in sections]}


@router.post("/homepage-sections", status_code=status.HTTP_201_CREATED)
def create_homepage_section(
    body: HomepageSectionCreate,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    section = HomepageSection(**body.model_dump())
    db.add(section)
    db.commit()
    db.refresh(section)
    return {"section": HomepageSectionOut.model_validate(section)}


@router.patch("/homepage-sections/{section_id}")
def update_homepage_section(
    section_id: UUID,
    body: HomepageSectionUpdate,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    section = _section_or_404(db, section_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(section, key, value)
    db.commit()
    db.refresh(section)
    return {"section": HomepageSectionOut.model_validate(section)}


@router.delete("/homepage-sections/{section_id}", response_model=MessageResponse)
def delete_homepage_section(
    section_id: UUID,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    db.delete(_section_or_404(db, section_id))
    db.commit()
    return {"success": True, "message": "Section deleted successfully"}


# -------------------------------------------------------------------
# Footer
# -------------------------------------------------------------------

@router.get("/footer")
def read_footer(db: Session = Depends(get_db)):
    blocks = (
        db.query(FooterContent)
        .filter(FooterContent.is_active.is_(True))
        .order_by(FooterContent.sort_order.asc())
        .all()
    )
    return {"footer": [FooterBlockOut.model_validate(b) for b in blocks]}


@router.post("/footer", response_model=MessageResponse)
def replace_footer(
    body: FooterReplace,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    """Deletes every footer block and writes the new set."""
    if body.sections is None:
        raise ValidationError("Sections array is required")

    db.query(FooterContent).delete(synchronize_session=False)
    for block in body.sections:
        db.add(FooterContent(**block.model_dump()))
    db.commit()
    return {"success": True, "message": "Footer content updated successfully"}
