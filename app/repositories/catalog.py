from app.domain.catalog import Component
from app.repositories.base import BaseRepository


class ComponentRepository(BaseRepository[Component]):
    model = Component
