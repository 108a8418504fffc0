"""Page model (the subset menu items link to)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import BaseModel


class Page(BaseModel):
    """A CMS page. An empty slug is the homepage."""

    __tablename__ = "pages"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Page /{self.slug}: {self.title}>"
