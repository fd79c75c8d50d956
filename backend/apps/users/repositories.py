from apps.common.repository import GenericRepository
from .models import User


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)

    def get(self, **filters):
        # Only active accounts can own or act on a cart.
        return self.model.objects.filter(is_active=True, **filters).first()
