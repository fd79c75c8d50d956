from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    # Identity comes from the external auth collaborator; carts only need a stable FK target.
    email = models.EmailField(unique=True)

    def __str__(self):
        return self.username
