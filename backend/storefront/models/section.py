from storefront.extensions import db
from .base import BaseModel


class LandingSection(BaseModel):
    __tablename__ = "landing_sections"

    page_id = db.Column(db.String(36), db.ForeignKey("landing_pages.id"), nullable=False, index=True)
    type = db.Column(db.String(50), nullable=False)  # see SectionType
    order = db.Column(db.Integer, nullable=False, default=0)
    settings = db.Column(db.JSON, nullable=False, default=dict)

    page = db.relationship("LandingPage", back_populates="sections")
