from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
import math

from shop_admin.schemas.image import CamelModel


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total=total,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class ORMModel(CamelModel):
    # Response schemas read straight off SQLAlchemy rows
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Message(CamelModel):
    success: bool = True
    message: str
