from typing import Generic, Optional, Type, TypeVar

from django.db import models

T = TypeVar("T", bound=models.Model)


class GenericRepository(Generic[T]):
    """Thin ORM gateway shared by the app-level repositories."""

    def __init__(self, model: Type[T]):
        self.model = model

    def get(self, **filters) -> Optional[T]:
        return self.model.objects.filter(**filters).first()

    def count(self, **filters) -> int:
        return self.model.objects.filter(**filters).count()

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def save(self, obj: T) -> T:
        # Django inserts when the pk is unset and updates otherwise.
        obj.save()
        return obj

    def delete_where(self, **filters) -> int:
        deleted, _ = self.model.objects.filter(**filters).delete()
        return deleted
