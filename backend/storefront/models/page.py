from storefront.extensions import db
from storefront.domain.lifecycle.page import page_status
from .base import BaseModel


class LandingPage(BaseModel):
    __tablename__ = "landing_pages"

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, unique=True, index=True)
    theme = db.Column(db.JSON, nullable=False, default=dict)
    is_published = db.Column(db.Boolean, nullable=False, default=False, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # Relationship to Sections (ordered, cascade deletes)
    sections = db.relationship(
        "LandingSection",
        back_populates="page",
        order_by="LandingSection.order",
        cascade="all, delete-orphan",
    )

    @property
    def status(self) -> str:
        return page_status(bool(self.is_published))
